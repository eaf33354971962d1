# PACKL v1.0
from abc import ABC, abstractmethod


class BaseInstaller(ABC):
    '''
    Base class for the package type installers
    Every package type (executable, zip, portable) has one
    '''

    def __init__(self, manifest):
        '''Initialize installer with package manifest'''
        self.manifest = manifest
        self.package_name = manifest.name

    @abstractmethod
    def install(self, artifact_path, app_folder, timeout=None, cancel_event=None):
        '''Install the verified artifact into app_folder.
        Returns the main installed file if the installer knows it, else None.
        '''
        pass  # Subclass MUST implement!

    def executable_path(self, app_folder, installed_file=None):
        '''Program the command alias should point to'''
        if self.manifest.bin:
            return app_folder / self.manifest.bin
        if installed_file is not None:
            return installed_file
        return app_folder / self.package_name
