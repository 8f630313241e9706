import json
import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)


class JsonCredentialStore:
    def __init__(self, path: str | Path) -> None:
        self._path = Path(path).expanduser()

    @property
    def path(self) -> Path:
        return self._path

    def load(self, host: str) -> str | None:
        client_key = self._read().get(host)
        if isinstance(client_key, str) and client_key:
            return client_key
        return None

    def save(self, host: str, client_key: str) -> None:
        credentials = self._read()
        credentials[host] = client_key
        self._write(credentials)
        logger.debug("Stored pairing credential for %s in %s", host, self._path)

    def forget(self, host: str) -> bool:
        credentials = self._read()
        if host not in credentials:
            return False
        del credentials[host]
        self._write(credentials)
        return True

    def _read(self) -> dict[str, str]:
        try:
            with open(self._path) as f:
                data = json.load(f)
        except FileNotFoundError:
            return {}
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning("Ignoring unreadable credential file %s: %s", self._path, exc)
            return {}
        if not isinstance(data, dict):
            logger.warning("Ignoring malformed credential file %s", self._path)
            return {}
        return {k: v for k, v in data.items() if isinstance(v, str)}

    def _write(self, credentials: dict[str, str]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self._path.with_name(self._path.name + ".tmp")
        with open(tmp_path, "w") as f:
            json.dump(credentials, f, indent=2, sort_keys=True)
        os.chmod(tmp_path, 0o600)
        os.replace(tmp_path, self._path)
