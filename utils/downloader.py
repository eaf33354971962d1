# PACKL v1.0 - Artifact downloads
import logging
from pathlib import Path
from urllib.parse import urlsplit, unquote

import requests

import config
from utils.errors import DownloadError, OperationCancelledError
from utils.progress import download_progress
from utils.validation import validate_filename

_log = logging.getLogger(__name__)

CHUNK_SIZE = 8192


def create_session():
    '''HTTP session shared by manifest fetches and downloads'''
    session = requests.Session()
    session.headers.update({
        'User-Agent': config.USER_AGENT,
        'Accept-Encoding': 'gzip, deflate',
    })
    return session


def filename_from_url(url):
    '''Last path segment of the URL, used as the local file name'''
    name = unquote(urlsplit(url).path.rstrip('/').split('/')[-1])
    try:
        return validate_filename(name)
    except ValueError:
        raise DownloadError(f"Cannot derive a file name from {url}", step="download")


def unique_target(dest_dir, filename):
    '''Path in dest_dir for filename that does not exist yet (app.exe, app-1.exe, ...)'''
    target = dest_dir / filename
    counter = 1
    while target.exists():
        target = dest_dir / f"{Path(filename).stem}-{counter}{Path(filename).suffix}"
        counter += 1
    return target


def discard_download(path):
    '''Delete a downloaded file. Returns the path if it could not be removed.'''
    try:
        Path(path).unlink()
    except FileNotFoundError:
        pass
    except OSError as e:
        _log.warning("Could not remove %s: %s", path, e)
        return str(path)
    return None


def download_file(url, session, dest_dir=None, cancel_event=None, timeout=None):
    '''Stream url into dest_dir and return the local path.
    Existing files are never overwritten; a partial file is removed on any failure.
    '''
    dest_dir = Path(dest_dir or config.DOWNLOADS_DIR)
    dest_dir.mkdir(parents=True, exist_ok=True)
    target = unique_target(dest_dir, filename_from_url(url))

    _log.info("Downloading %s -> %s", url, target)

    try:
        response = session.get(url, stream=True, timeout=timeout or config.REQUEST_TIMEOUT)
        response.raise_for_status()
    except requests.RequestException as e:
        raise DownloadError(f"Download of {url} failed: {e}", step="download") from e

    total = response.headers.get('Content-Length')
    total = int(total) if total and total.isdigit() else None

    written = 0
    try:
        with response, open(target, 'wb') as f, download_progress() as progress:
            task = progress.add_task(target.name, total=total)
            for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                if cancel_event is not None and cancel_event.is_set():
                    raise OperationCancelledError(f"Download of {url} cancelled", step="download")
                if not chunk:
                    continue
                f.write(chunk)
                written += len(chunk)
                progress.update(task, advance=len(chunk))
    except (OperationCancelledError, KeyboardInterrupt):
        discard_download(target)
        raise
    except (requests.RequestException, OSError) as e:
        leftover = discard_download(target)
        message = f"Download of {url} failed after {written} bytes: {e}"
        if leftover:
            message += f" (partial file left at {leftover})"
        raise DownloadError(message, step="download") from e

    _log.info("Downloaded %d bytes to %s", written, target)
    return target
