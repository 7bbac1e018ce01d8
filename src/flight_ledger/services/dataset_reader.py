"""
Dataset reader for passenger manifest files.

Turns each data line of a delimited manifest into a RawCandidate. Lines that
fail to parse are still returned, with the failure reason attached, so the
loader can count every line toward trip numbering.
"""

import csv
import structlog
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Union

from ..config import config
from ..types import CabinGeometry, RawCandidate, SeatClass, SourceUnreadableError
from ..utils.validators import (
    normalize_seat_column,
    parse_int,
    validate_seat_class,
    validate_seat_column,
)


FIELD_COUNT = 5


class DatasetReader:
    """Reads passengerId, name, seatRow, seatColumn, seatClass lines"""

    def __init__(
        self,
        geometry: Optional[CabinGeometry] = None,
        delimiter: Optional[str] = None,
        encoding: Optional[str] = None,
        has_header: Optional[bool] = None,
        name_max_length: Optional[int] = None
    ):
        self.geometry = geometry or CabinGeometry.from_config(config.cabin)
        self.delimiter = delimiter or config.dataset.delimiter
        self.encoding = encoding or config.dataset.encoding
        self.has_header = config.dataset.has_header if has_header is None else has_header
        self.name_max_length = name_max_length or config.cabin.name_max_length
        self.logger = structlog.get_logger("dataset_reader")

    def read(self, path: Union[str, Path]) -> List[RawCandidate]:
        """
        Read every data line of a manifest file.

        Raises:
            SourceUnreadableError: The file is missing, unreadable or not text
        """
        try:
            with open(path, "r", encoding=self.encoding, newline="") as handle:
                candidates = self.read_lines(handle)
        except (OSError, UnicodeDecodeError) as e:
            raise SourceUnreadableError(str(path), str(e)) from e

        self.logger.info(
            "Dataset read",
            source=str(path),
            lines=len(candidates),
            parse_failures=sum(1 for c in candidates if not c.parsed)
        )
        return candidates

    def read_lines(self, lines: Iterable[str]) -> List[RawCandidate]:
        """Parse manifest text already split into lines, header included"""
        reader = csv.reader(lines, delimiter=self.delimiter)
        if self.has_header:
            next(reader, None)

        # Ordinals count CSV records; a quoted newline inside a name does not
        # start a new one.
        return [
            self.parse_fields(fields, ordinal)
            for ordinal, fields in enumerate(reader, start=1)
        ]

    def parse_line(self, line: str, ordinal: int) -> RawCandidate:
        fields = next(csv.reader([line.rstrip("\r\n")], delimiter=self.delimiter), [])
        return self.parse_fields(fields, ordinal)

    def parse_fields(self, fields: Sequence[str], ordinal: int) -> RawCandidate:
        """Build a candidate from split fields; never raises"""
        if len(fields) < FIELD_COUNT:
            return RawCandidate(ordinal=ordinal, error="missing fields")

        passenger_id = parse_int(fields[0])
        if passenger_id is None:
            return RawCandidate(ordinal=ordinal, error="invalid passenger id")

        name = fields[1].strip()[:self.name_max_length]

        seat_row = parse_int(fields[2])
        if seat_row is None:
            return RawCandidate(
                ordinal=ordinal, passenger_id=passenger_id, name=name,
                error="invalid seat row"
            )

        if not validate_seat_column(fields[3], self.geometry.columns):
            return RawCandidate(
                ordinal=ordinal, passenger_id=passenger_id, name=name,
                seat_row=seat_row, error="invalid seat column"
            )
        seat_column = normalize_seat_column(fields[3])

        seat_class = fields[4].strip()
        if not validate_seat_class(seat_class, (c.value for c in SeatClass)):
            return RawCandidate(
                ordinal=ordinal, passenger_id=passenger_id, name=name,
                seat_row=seat_row, seat_column=seat_column,
                error="invalid seat class"
            )

        return RawCandidate(
            ordinal=ordinal,
            passenger_id=passenger_id,
            name=name,
            seat_row=seat_row,
            seat_column=seat_column,
            seat_class=seat_class,
        )
