# PACKL v1.0 - Manifest repository client
import json
import logging

import requests

import config
from apps.manifest import Manifest
from utils.errors import ManifestError

_log = logging.getLogger(__name__)


def manifest_url(package_name, base_url=None):
    '''URL of a package manifest in the repository'''
    base_url = base_url or config.MANIFEST_URL
    if not base_url.endswith('/'):
        base_url += '/'
    return f"{base_url}{package_name}.json"


def fetch_manifest(package_name, session, base_url=None):
    '''Download and parse a package manifest'''
    url = manifest_url(package_name, base_url)
    _log.info("Fetching manifest %s", url)

    try:
        response = session.get(url, timeout=config.REQUEST_TIMEOUT)
    except requests.exceptions.Timeout as e:
        raise ManifestError(f"Timed out fetching {url}", package=package_name, step="manifest") from e
    except requests.RequestException as e:
        raise ManifestError(f"Cannot reach manifest repository: {e}", package=package_name, step="manifest") from e

    if response.status_code == 404:
        raise ManifestError(f"Package '{package_name}' not found ({url})", package=package_name, step="manifest")
    if response.status_code != 200:
        raise ManifestError(f"Server error {response.status_code} for {url}", package=package_name, step="manifest")

    try:
        data = json.loads(response.text)
    except json.JSONDecodeError as e:
        raise ManifestError(f"Invalid manifest JSON: {e}", package=package_name, step="manifest") from e

    return Manifest.from_dict(package_name, data)
