"""CSV export functionality for the beam simulation."""

import csv
from pathlib import Path
from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from ..model.state import RoundSnapshot


FIELDNAMES = ['round', 'live_rays', 'new_states', 'retired', 'dropped', 'visited']


class CSVWriter:
    """
    Exports per-round simulation data to CSV format incrementally.

    Output format:
        round,live_rays,new_states,retired,dropped,visited
        1,1,1,0,0,1
        ...
    """

    def __init__(self, output_path: Path):
        self.output_path = Path(output_path)
        self.file: Optional[object] = None
        self.writer: Optional[csv.DictWriter] = None
        self._is_open = False

    def open(self) -> None:
        """Initialize file and write header."""
        self.output_path.parent.mkdir(parents=True, exist_ok=True)
        self.file = open(self.output_path, 'w', newline='')
        self.writer = csv.DictWriter(self.file, fieldnames=FIELDNAMES)
        self.writer.writeheader()
        self._is_open = True

    def append(self, snapshot: "RoundSnapshot") -> None:
        """Write one row for a completed round."""
        if not self._is_open:
            self.open()
        self.writer.writerow(snapshot.to_csv_row())
        self.file.flush()

    def close(self) -> None:
        """Close file handle."""
        if self.file:
            self.file.close()
            self.file = None
            self.writer = None
            self._is_open = False

    def __enter__(self):
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
