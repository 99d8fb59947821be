#
# azblueprint/common.py
#
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License.
#
'''
Application base class: argument parsing, logger setup, and the
mapping from ApplicationExit to a process exit status.
'''
import inspect
import logging
import os
import sys
import traceback

from azblueprint.base_defaults import EXC_VALUE_DEFAULT
from azblueprint.btypes import LogTo
from azblueprint.config import ENV_DEBUG
from azblueprint.exceptions import ApplicationExit
from azblueprint.util import (ArgExplicit,
                              ArgumentParser,
                              item_pformat,
                              log_level_normalize,
                             )

class Application():
    '''
    Base class for a command-line application.

    A subclass adds its own arguments in main_add_parser_args()
    (calling super() first), accepts them as keyword arguments in
    __init__ (passing the rest to super()), and does its work in
    main_execute(), which ends by raising ApplicationExit.
    '''
    def __init__(self,
                 args_explicit=None,
                 debug=0,
                 exc_value=EXC_VALUE_DEFAULT,
                 log_level=None,
                 log_to=None,
                 logger_stream=None,
                 log_file=None,
                 log_fmt=None,
                 logger=None,
                 **kwargs):
        '''
        args_explicit: names of arguments given explicitly on the command line
        debug: extra verbosity for checks like "self.debug > 0"
        exc_value: exception class raised for invalid values
        log_level, log_to, logger_stream, log_file, log_fmt: used only when logger is None
        '''
        if kwargs:
            raise TypeError("%s: unexpected keyword arguments %s" % (type(self).__name__, ','.join(sorted(kwargs.keys()))))
        self.args_explicit = set(args_explicit or ())
        self.debug = debug
        self.exc_value = exc_value
        self._log_level = log_level_normalize(log_level if log_level is not None else self.LOG_LEVEL_DEFAULT)
        if logger is None:
            logger = self._logger_create(self._log_level,
                                         stream=logger_stream or self._stream_for(log_to or self.LOG_TO_DEFAULT),
                                         log_file=log_file,
                                         log_fmt=log_fmt or self.LOG_FORMAT)
        self._logger = logger

    # Combined with the LOGGER_NAME of every class in the MRO; see logger_name_get()
    LOGGER_NAME = 'azblueprint'

    LOG_FORMAT = "%(message)s"

    LOG_LEVEL_DEFAULT = 'info'

    LOG_LEVEL_CHOICES = ('debug', 'info', 'warning', 'error', 'critical')

    LOG_TO_DEFAULT = LogTo.STDERR.value

    # (logger name, level) pairs applied whenever a logger is created here
    QUIET_LOGGERS = (('azure.core.pipeline.policies.http_logging_policy', logging.WARNING),
                     ('azure.identity', logging.ERROR),
                     ('msrest', logging.WARNING),
                    )

    EXIT_VERBOSE_ALWAYS = False

    @property
    def logger(self):
        '''
        Getter
        '''
        return self._logger

    @property
    def log_level(self):
        '''
        Getter
        '''
        return self._log_level

    @classmethod
    def logger_name_get(cls):
        '''
        Return the dotted logger name for this class, built from
        LOGGER_NAME along the MRO with repeats dropped.
        '''
        names = list()
        for kls in reversed(inspect.getmro(cls)):
            name = kls.__dict__.get('LOGGER_NAME', '')
            if name and ((not names) or (names[-1] != name)):
                names.append(name)
        return '.'.join(names)

    @staticmethod
    def _stream_for(log_to):
        return sys.stderr if LogTo(log_to) == LogTo.STDERR else sys.stdout

    @classmethod
    def _logger_create(cls, log_level, stream=None, log_file=None, log_fmt=None):
        '''
        Configure the root handler once and return this class's logger
        '''
        if log_file:
            dirname = os.path.dirname(os.path.abspath(log_file))
            if not os.path.isdir(dirname):
                raise ValueError("cannot log to %s: directory %s does not exist" % (log_file, dirname))
            if not os.access(dirname, os.W_OK):
                raise PermissionError("cannot log to %s: directory %s is not writeable" % (log_file, dirname))
            logging.basicConfig(format=log_fmt, filename=log_file)
        else:
            logging.basicConfig(format=log_fmt, stream=stream)
        logger = logging.getLogger(name=cls.logger_name_get())
        logger.setLevel(log_level)
        for name, level in cls.QUIET_LOGGERS:
            logging.getLogger(name=name).setLevel(level)
        return logger

    @classmethod
    def from_args_dict(cls, args_dict):
        '''
        Return an application instance given args_dict
        '''
        return cls(**args_dict)

    @classmethod
    def main_app_setup(cls, cmd_args):
        '''
        Parse cmd_args and construct the application.
        Split out from main_with_args() for unit tests; exceptions are not handled here.
        Returns (app, debug, exit_verbose, logger)
        '''
        ap_parser = ArgumentParser(allow_abbrev=False)
        cls.main_add_parser_args(ap_parser)
        args_dict = vars(ap_parser.parse_args(args=cmd_args))
        args_dict.setdefault('args_explicit', set())
        exit_verbose = args_dict.pop('exit_verbose', False) or cls.EXIT_VERBOSE_ALWAYS
        args_dict['exc_value'] = ApplicationExit
        app = cls.from_args_dict(args_dict)
        return (app, app.debug, exit_verbose, app.logger)

    @classmethod
    def main(cls):
        '''
        Entrypoint as from the command-line.
        '''
        cls.main_with_args(sys.argv[1:])

    @staticmethod
    def _report(logger, level, msg):
        if logger is not None:
            logger.log(level, "%s", msg)
        else:
            print(msg, file=sys.stderr, flush=True)

    @classmethod
    def main_with_args(cls, cmd_args):
        '''
        Run the application for cmd_args (typically sys.argv[1:]).
        Always raises SystemExit: 0 when the application exits with
        a false code, 1 for any other code or an unhandled exception.
        A non-integer exit code is reported as an error message.
        '''
        debug = 1
        exit_verbose = cls.EXIT_VERBOSE_ALWAYS or ('--exit_verbose' in cmd_args)
        logger = None
        try:
            app, debug, exit_verbose, logger = cls.main_app_setup(cmd_args)
            app.main_execute()
            logger.error("%s.main_execute returned unexpectedly", type(app).__name__)
            code = 1
        except SystemExit as exc:
            # argparse usage errors and --help
            if exit_verbose:
                cls._report(logger, logging.INFO, "exit code %r" % exc.code)
            raise
        except ApplicationExit as exc:
            code = exc.code
            if exit_verbose and (debug > 0) and (logger is not None):
                logger.info("exit stack:\n%s", traceback.format_exc())
            if not isinstance(code, (bool, int, type(None))):
                cls._report(logger, logging.ERROR, str(code))
        except Exception as exc:
            cls._report(logger, logging.ERROR, "%r\n%s\n%s" % (exc, item_pformat(exc), traceback.format_exc()))
            code = 1
        status = int(bool(code))
        if exit_verbose:
            cls._report(logger, logging.INFO, "exit code %r" % status)
        raise SystemExit(status)

    @staticmethod
    def debug_default():
        '''
        Return the default debug level from AZBLUEPRINT_DEBUG.
        An unparseable value is reported and ends the program.
        '''
        env = os.environ.get(ENV_DEBUG, '')
        if not env:
            return 0
        try:
            return int(env)
        except ValueError as exc:
            print("invalid value '%s' for %s" % (env, ENV_DEBUG), file=sys.stderr)
            raise ApplicationExit(1) from exc

    @classmethod
    def main_add_parser_args(cls, ap_parser):
        '''
        Add command-line arguments.
        Subclasses extend this and call super().main_add_parser_args(ap_parser).
        '''
        group = ap_parser.get_argument_group('common')
        group.add_argument('--debug', type=int, default=cls.debug_default(), action=ArgExplicit,
                           help='debug level')
        if not cls.EXIT_VERBOSE_ALWAYS:
            group.add_argument('--exit_verbose', action='store_true',
                               help='log the exit status')
        group.add_argument('--log_level', type=str, default=cls.LOG_LEVEL_DEFAULT, choices=cls.LOG_LEVEL_CHOICES, action=ArgExplicit,
                           help='log level')
        group.add_argument('--log_to', type=str, default=cls.LOG_TO_DEFAULT, choices=LogTo.values(), action=ArgExplicit,
                           help='log destination')
        group.add_argument('--log_file', type=str, default=None, action=ArgExplicit,
                           help='log to this file instead of stdout or stderr')

    def main_execute(self):
        '''
        Do the work of the application, then raise ApplicationExit
        '''
        raise NotImplementedError("%s did not implement this method" % type(self).__name__)
