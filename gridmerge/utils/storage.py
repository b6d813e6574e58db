"""
Access to game saves: one JSON file per board size.
"""

import json
import logging
import os
import tempfile
from pathlib import Path

from gridmerge.errors import CorruptRecord
from gridmerge.utils.codec import Record, empty_record

_logger = logging.getLogger(__name__)


class GameStorage:
    """
    Reads and writes the records of every board size under a save directory.

    Saves of different sizes are independent: writing one never touches another.
    """

    # ##: Name of the save of a board size.
    FILE_TEMPLATE = 'grid{size}.json'

    def __init__(self, save_dir: str | Path = 'SaveData'):
        self.save_dir = Path(save_dir)

    def path(self, size: int) -> Path:
        """Path of the save file of a board size."""
        return self.save_dir / self.FILE_TEMPLATE.format(size=size)

    def exists(self, size: int) -> bool:
        """Check if a save exists for a board size."""
        return self.path(size).is_file()

    def load(self, size: int) -> Record:
        """
        Load the record of a board size.

        Parameters
        ----------
        size : int
            Side length of the board.

        Returns
        -------
        Record
            The saved record, or a fresh empty record when there is no usable save.

        Notes
        -----
        An unreadable or corrupt save is treated as absent: a warning is logged and an empty record is returned.
        The file is left in place until the next save overwrites it.
        """
        path = self.path(size)
        if not path.is_file():
            return empty_record(size)

        try:
            data = json.loads(path.read_text(encoding='utf-8'))
            return Record.from_dict(data, size)
        except (OSError, ValueError, CorruptRecord) as error:
            _logger.warning('Discarding unusable save %s: %s', path, error)
            return empty_record(size)

    def save(self, record: Record) -> None:
        """
        Write the record of a board size.

        Parameters
        ----------
        record : Record
            The record to write.

        Notes
        -----
        The file is replaced atomically: the record is written to a temporary file in the save directory first.
        """
        self.save_dir.mkdir(parents=True, exist_ok=True)
        path = self.path(record.size)

        descriptor, temp_path = tempfile.mkstemp(dir=self.save_dir, prefix=f'.{path.name}.', suffix='.tmp')
        try:
            with os.fdopen(descriptor, 'w', encoding='utf-8') as stream:
                json.dump(record.to_dict(), stream)
            os.replace(temp_path, path)
        except BaseException:
            Path(temp_path).unlink(missing_ok=True)
            raise

        _logger.debug('Saved %s', path)

    def delete(self, size: int) -> None:
        """Remove the save of a board size, if any."""
        self.path(size).unlink(missing_ok=True)
