#
# azblueprint/__init__.py
#
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License.
#
'''
Base azblueprint import
'''
from .config import cfg

__all__ = ['cfg',
          ]

reset_hooks = [cfg.reset,
              ]
