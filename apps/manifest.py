# PACKL v1.0
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple

from utils.errors import ManifestError


class PackageType(Enum):
    EXECUTABLE = "executable"
    ZIP = "zip"
    PORTABLE = "portable"


@dataclass(frozen=True)
class Manifest:
    '''Declarative description of a package, as published in the manifest repository'''
    name: str
    type: PackageType
    url: str
    hash: str
    version: Optional[str] = None
    description: Optional[str] = None
    homepage: Optional[str] = None
    license: Optional[str] = None
    install_args: Tuple[str, ...] = field(default_factory=tuple)
    dependencies: Tuple[str, ...] = field(default_factory=tuple)
    bin: Optional[str] = None
    autoupdate_url: Optional[str] = None

    @classmethod
    def from_dict(cls, name, data):
        '''Build a Manifest from parsed manifest JSON'''
        if not isinstance(data, dict):
            raise ManifestError("Manifest must be a JSON object", package=name, step="manifest")

        missing = [key for key in ('type', 'url', 'hash') if not data.get(key)]
        if missing:
            raise ManifestError(f"Manifest is missing: {', '.join(missing)}", package=name, step="manifest")

        try:
            package_type = PackageType(str(data['type']).lower())
        except ValueError:
            raise ManifestError(f"Unknown package type '{data['type']}'", package=name, step="manifest")

        installer = data.get('installer') or {}
        autoupdate = data.get('autoupdate') or {}

        return cls(
            name=name,
            type=package_type,
            url=data['url'],
            hash=str(data['hash']).strip().lower(),
            version=data.get('version'),
            description=data.get('description'),
            homepage=data.get('homepage'),
            license=data.get('license'),
            install_args=tuple(installer.get('args') or ()),
            dependencies=tuple(data.get('dependencies') or ()),
            bin=data.get('bin'),
            autoupdate_url=autoupdate.get('url'),
        )

    def autoupdate_url_for(self, version):
        '''Artifact URL of another version, from the autoupdate template'''
        if not self.autoupdate_url:
            return None
        return self.autoupdate_url.replace('$version', str(version))
