#
# azblueprint/disk_encryption.py
#
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License.
#
'''
Enable Azure Disk Encryption on a VM through the AzureDiskEncryption extension.

The flow is:
  - install (create or update) the extension with public and protected settings
  - read back the extension instance view; the first status message is the
    URL of the secret the extension wrote to the key vault
  - record that secret (and the optional key encryption key) in the
    encryption settings of the OS disk and update the VM
'''
import logging

from azure.mgmt.compute.models import (DiskEncryptionSettings,
                                       KeyVaultKeyReference,
                                       KeyVaultSecretReference,
                                       SubResource,
                                       VirtualMachineExtension,
                                      )

from azblueprint.base_defaults import LOGGER_NAME_DEFAULT
from azblueprint.btypes import (KeyEncryptionAlgorithm,
                                VolumeType,
                               )
from azblueprint.exceptions import (InvalidArgument,
                                    InvalidResult,
                                   )
from azblueprint.mgmtcall import mgmtcall
from azblueprint.scope import (uri_validate,
                               vault_id_validate,
                              )
from azblueprint.semantic_version import SemanticVersion
from azblueprint.util import getframe

EXTENSION_PUBLISHER = 'Microsoft.Azure.Security'
EXTENSION_TYPE = 'AzureDiskEncryption'
EXTENSION_VERSION_DEFAULT = '1.1'

ENCRYPTION_OPERATION_ENABLE = 'EnableEncryption'

ENABLE_CAPTION = 'Enable AzureDiskEncryption on the VM'
ENABLE_CONFIRMATION = 'This cmdlet prepares the VM and enables encryption which may reboot the machine and takes 10-15 minutes to finish. Please save your work on the VM before confirming. Do you want to continue?'

class DiskEncryptionParams():
    '''
    Inputs to set_disk_encryption_extension().
    Exactly one of aad_client_secret and aad_client_cert_thumbprint must be given.
    '''
    def __init__(self,
                 aad_client_id,
                 disk_encryption_key_vault_url,
                 disk_encryption_key_vault_id,
                 aad_client_secret=None,
                 aad_client_cert_thumbprint=None,
                 key_encryption_key_url=None,
                 key_encryption_key_vault_id=None,
                 key_encryption_algorithm=None,
                 volume_type=None,
                 sequence_version=None,
                 type_handler_version=None):
        self.aad_client_id = aad_client_id
        self.aad_client_secret = aad_client_secret
        self.aad_client_cert_thumbprint = aad_client_cert_thumbprint
        self.disk_encryption_key_vault_url = disk_encryption_key_vault_url
        self.disk_encryption_key_vault_id = disk_encryption_key_vault_id
        self.key_encryption_key_url = key_encryption_key_url
        self.key_encryption_key_vault_id = key_encryption_key_vault_id
        self.key_encryption_algorithm = key_encryption_algorithm
        self.volume_type = volume_type
        self.sequence_version = sequence_version
        self.type_handler_version = type_handler_version

    def __repr__(self):
        # secrets are not shown
        return "%s(aad_client_id=%r, disk_encryption_key_vault_url=%r, volume_type=%r)" % (type(self).__name__, self.aad_client_id, self.disk_encryption_key_vault_url, self.volume_type)

    def validate(self):
        '''
        Check the parameters. Raise InvalidArgument on the first problem found.
        '''
        if not (self.aad_client_id and str(self.aad_client_id).strip()):
            raise InvalidArgument("aad_client_id is required")
        if bool(self.aad_client_secret) == bool(self.aad_client_cert_thumbprint):
            raise InvalidArgument("exactly one of aad_client_secret and aad_client_cert_thumbprint is required")
        uri_validate(self.disk_encryption_key_vault_url, desc='disk_encryption_key_vault_url')
        vault_id_validate(self.disk_encryption_key_vault_id, desc='disk_encryption_key_vault_id')
        if self.key_encryption_key_url is not None:
            uri_validate(self.key_encryption_key_url, desc='key_encryption_key_url')
            vault_id_validate(self.key_encryption_key_vault_id, desc='key_encryption_key_vault_id')
        elif self.key_encryption_key_vault_id is not None:
            raise InvalidArgument("key_encryption_key_vault_id requires key_encryption_key_url")
        if self.key_encryption_algorithm is not None:
            KeyEncryptionAlgorithm.coerce(self.key_encryption_algorithm, exc_value=InvalidArgument, prefix='key_encryption_algorithm')
        if self.volume_type is not None:
            VolumeType.coerce(self.volume_type, exc_value=InvalidArgument, prefix='volume_type')
        if self.type_handler_version is not None:
            SemanticVersion.from_text(self.type_handler_version, exc_value=InvalidArgument)

    def public_settings(self):
        '''
        Return the extension public settings. Unset values are sent as empty strings.
        '''
        return {'AADClientID' : self.aad_client_id or '',
                'AADClientCertThumbprint' : self.aad_client_cert_thumbprint or '',
                'KeyVaultURL' : self.disk_encryption_key_vault_url or '',
                'KeyEncryptionKeyURL' : self.key_encryption_key_url or '',
                'KeyEncryptionAlgorithm' : _enum_text(self.key_encryption_algorithm),
                'VolumeType' : _enum_text(self.volume_type),
                'EncryptionOperation' : ENCRYPTION_OPERATION_ENABLE,
                'SequenceVersion' : self.sequence_version or '',
               }

    def protected_settings(self):
        '''
        Return the extension protected settings
        '''
        return {'AADClientSecret' : self.aad_client_secret or ''}

    def encryption_settings(self, secret_url):
        '''
        Return DiskEncryptionSettings for the OS disk given the secret URL reported by the extension
        '''
        ret = DiskEncryptionSettings(disk_encryption_key=KeyVaultSecretReference(secret_url=secret_url,
                                                                                 source_vault=SubResource(id=self.disk_encryption_key_vault_id)))
        if self.key_encryption_key_url is not None:
            ret.key_encryption_key = KeyVaultKeyReference(key_url=self.key_encryption_key_url,
                                                          source_vault=SubResource(id=self.key_encryption_key_vault_id))
        return ret

def _enum_text(value):
    if value is None:
        return ''
    return getattr(value, 'value', value)

class DiskEncryptionClient():
    '''
    Wrap an azure.mgmt.compute.ComputeManagementClient
    '''
    def __init__(self, compute_client, logger=None):
        self._compute_client = compute_client
        self.logger = logger or logging.getLogger(LOGGER_NAME_DEFAULT)

    def _call(self, op, *args, **kwargs):
        return mgmtcall(self.logger, op, *args, **kwargs)

    def _vm_get(self, resource_group_name, vm_name):
        vm = self._call(self._compute_client.virtual_machines.get, resource_group_name, vm_name)
        if vm is None:
            raise InvalidResult("disk encryption can be enabled only on a VM that was already created (%s/%s)" % (resource_group_name, vm_name))
        return vm

    def extension_parameters(self, vm, params):
        '''
        Return VirtualMachineExtension for installing the extension on vm
        '''
        return VirtualMachineExtension(location=vm.location,
                                       publisher=EXTENSION_PUBLISHER,
                                       type_properties_type=EXTENSION_TYPE,
                                       type_handler_version=params.type_handler_version or EXTENSION_VERSION_DEFAULT,
                                       settings=params.public_settings(),
                                       protected_settings=params.protected_settings())

    def extension_status_message(self, resource_group_name, vm_name, extension_name):
        '''
        Return the first status message of the installed extension.
        For AzureDiskEncryption this is the URL of the disk encryption secret.
        '''
        ext = self._call(self._compute_client.virtual_machine_extensions.get, resource_group_name, vm_name, extension_name, expand='instanceView')
        if ext is None:
            raise InvalidResult("failed to retrieve extension status")
        publisher = getattr(ext, 'publisher', None)
        ext_type = getattr(ext, 'type_properties_type', None)
        if not ((publisher and publisher.strip()) and (ext_type and ext_type.strip())):
            raise InvalidResult("missing extension publisher and type info")
        if (publisher.lower() != EXTENSION_PUBLISHER.lower()) or (ext_type.lower() != EXTENSION_TYPE.lower()):
            raise InvalidResult("extension publisher and type mismatched (%s/%s)" % (publisher, ext_type))
        instance_view = getattr(ext, 'instance_view', None)
        statuses = getattr(instance_view, 'statuses', None) or list()
        if (not statuses) or (not (statuses[0].message and statuses[0].message.strip())):
            raise InvalidResult("invalid extension status")
        return statuses[0].message

    def set_disk_encryption_extension(self, resource_group_name, vm_name, extension_name, params, force=False, confirm=None):
        '''
        Install the disk encryption extension and enable encryption on the OS disk.
        Unless force is set, confirm(caption, question) is called first and must
        return True; otherwise nothing is done and None is returned.
        Returns the updated VirtualMachine.
        '''
        params.validate()
        if not force:
            if (confirm is None) or (not confirm(ENABLE_CAPTION, ENABLE_CONFIRMATION)):
                self.logger.info("%s not confirmed; disk encryption not enabled on %s/%s", getframe(0), resource_group_name, vm_name)
                return None

        vm = self._vm_get(resource_group_name, vm_name)
        ext_params = self.extension_parameters(vm, params)
        self.logger.info("%s install %s/%s %s on %s/%s", getframe(0), EXTENSION_PUBLISHER, EXTENSION_TYPE, ext_params.type_handler_version, resource_group_name, vm_name)
        poller = self._call(self._compute_client.virtual_machine_extensions.begin_create_or_update, resource_group_name, vm_name, extension_name, ext_params)
        self._call(poller.result)

        secret_url = self.extension_status_message(resource_group_name, vm_name, extension_name)

        vm = self._vm_get(resource_group_name, vm_name)
        if (vm.storage_profile is None) or (vm.storage_profile.os_disk is None):
            raise InvalidResult("disk encryption can be enabled only on a VM that has a storage profile and OS disk (%s/%s)" % (resource_group_name, vm_name))
        vm.storage_profile.os_disk.encryption_settings = params.encryption_settings(secret_url)
        self.logger.info("%s update OS disk encryption settings on %s/%s", getframe(0), resource_group_name, vm_name)
        poller = self._call(self._compute_client.virtual_machines.begin_create_or_update, resource_group_name, vm_name, vm)
        return self._call(poller.result)
