import logging
from pathlib import Path

from signature_algorithm import KeyFileError

logger = logging.getLogger(__name__)

DEFAULT_KEYS_PATH = '/tmp/keys.json'  # noqa: S108


def write_private_key(path: str | Path, private_key_hex: str) -> None:
    # overwrites whatever is there, permissions are left to the umask
    path = Path(path)
    try:
        path.write_text(private_key_hex, encoding='ascii')
    except OSError as exc:
        msg = f'cannot write key file {path}: {exc.strerror or exc}'
        raise KeyFileError(msg) from exc
    logger.info('wrote private key to %s', path)


def read_private_key(path: str | Path) -> bytes:
    """Raw content of the key file with surrounding whitespace removed."""
    path = Path(path)
    try:
        data = path.read_bytes()
    except OSError as exc:
        msg = f'cannot read key file {path}: {exc.strerror or exc}'
        raise KeyFileError(msg) from exc
    logger.debug('read %d bytes from %s', len(data), path)
    return data.strip()
