"""
Population frequency table used by the census-corrected journalist model.

The table holds, for every combination of quasi-identifier values, the size
of the matching group in the true population (e.g. as estimated from census
data). It is loaded once from two flat ``;``-delimited tables without header:

- vocabulary rows ``(dimension, id, label)`` encode every label of every
  dimension as an integer id;
- frequency rows ``(id_0, ..., id_{k-1}, group_size)`` give the size of the
  group identified by one id per dimension.

The storage order of the table's dimensions need not match the field order of
the records it is queried with. The mapping is fixed explicitly through
``field_order``: entry ``d`` names the record field that feeds table dimension
``d``. See CENSUS_2010_FIELD_ORDER for the layout of the census 2010 tables.

After construction the table is immutable and safe to share between threads.
"""

import logging
import math
import os
from typing import Any, Optional, Sequence, Union

import pandas as pd

from profitability_anonymize.constants import POPULATION_TABLE_DELIMITER
from profitability_anonymize.exceptions import ConfigurationError, LoadError

_LOGGER = logging.getLogger(__name__)

TableSource = Union[str, os.PathLike, pd.DataFrame]


def read_table(source: TableSource, name: str) -> pd.DataFrame:
    """
    Read a headerless, delimited reference table as strings.

    Parameters
    ----------
    source : str, os.PathLike or pd.DataFrame
        Path of the file to read, or a DataFrame that is used as is.
    name : str
        Name of the table, used in error messages.

    Returns
    -------
    pd.DataFrame
        The table with positional column labels.

    Raises
    ------
    LoadError
        If the file cannot be parsed.
    """
    if isinstance(source, pd.DataFrame):
        return source.reset_index(drop=True)
    try:
        return pd.read_csv(
            source,
            sep=POPULATION_TABLE_DELIMITER,
            header=None,
            dtype=str,
            keep_default_na=False,
            na_values=[],
        )
    except pd.errors.EmptyDataError as e:
        raise LoadError("Table is empty", source=str(source)) from e
    except pd.errors.ParserError as e:
        raise LoadError(f"Malformed table: {e}", source=str(source)) from e


def _parse_int(value: Any, what: str, source: str, row: int) -> int:
    if isinstance(value, float) and not value.is_integer():
        raise LoadError(f"{what} ({value!r}) is not an integer", source=source, row=row)
    try:
        return int(str(value).strip()) if not isinstance(value, float) else int(value)
    except (TypeError, ValueError) as e:
        raise LoadError(f"{what} ({value!r}) is not an integer", source=source, row=row) from e


def _check_complete(table: pd.DataFrame, num_columns: int, source: str) -> None:
    if len(table.columns) != num_columns:
        raise LoadError(
            f"Expected {num_columns} columns, found {len(table.columns)}", source=source
        )
    missing = table.isna().any(axis=1)
    if missing.any():
        raise LoadError("Row has missing fields", source=source, row=int(missing.idxmax()))


class PopulationFrequencyTable:
    """
    Immutable table of population group sizes.

    Use :meth:`build` to load a table from its two sources.

    Parameters
    ----------
    vocabulary : Sequence[dict[str, int]]
        Per table dimension, the mapping of labels to ids.
    group_sizes : dict[tuple[int, ...], float]
        Group size of each id tuple, ids in table dimension order.
    field_order : Sequence[int], optional
        Record field feeding each table dimension; identity if None.

    Raises
    ------
    ConfigurationError
        If field_order is not a permutation of the table's dimensions.
    """

    def __init__(
        self,
        vocabulary: Sequence[dict[str, int]],
        group_sizes: dict[tuple[int, ...], float],
        field_order: Optional[Sequence[int]] = None,
    ) -> None:
        num_dimensions = len(vocabulary)
        if field_order is None:
            field_order = tuple(range(num_dimensions))
        field_order = tuple(int(field) for field in field_order)
        if sorted(field_order) != list(range(num_dimensions)):
            raise ConfigurationError(
                f"field_order {field_order} is not a permutation of {num_dimensions} dimensions"
            )
        self._vocabulary = tuple(dict(labels) for labels in vocabulary)
        self._group_sizes = dict(group_sizes)
        self._field_order = field_order

    @classmethod
    def build(
        cls,
        vocabulary_source: TableSource,
        frequency_source: TableSource,
        field_order: Optional[Sequence[int]] = None,
        logger: Optional[logging.Logger] = None,
    ) -> "PopulationFrequencyTable":
        """
        Load a population table from a vocabulary and a frequency table.

        Parameters
        ----------
        vocabulary_source : str, os.PathLike or pd.DataFrame
            Rows ``(dimension, id, label)``.
        frequency_source : str, os.PathLike or pd.DataFrame
            Rows ``(id_0, ..., id_{k-1}, group_size)``, with k the number of
            dimensions of the vocabulary.
        field_order : Sequence[int], optional
            Record field feeding each table dimension; identity if None.
        logger : logging.Logger, optional
            Logger for reporting the load, by default this module's logger.

        Returns
        -------
        PopulationFrequencyTable
            The loaded table.

        Raises
        ------
        LoadError
            If any row of either table is malformed, a label or id is defined
            twice in a dimension, or a frequency row references an unknown id.
        """
        logger = logger if logger is not None else _LOGGER
        vocabulary_name = (
            "vocabulary" if isinstance(vocabulary_source, pd.DataFrame) else str(vocabulary_source)
        )
        frequency_name = (
            "frequencies" if isinstance(frequency_source, pd.DataFrame) else str(frequency_source)
        )
        vocabulary = cls._load_vocabulary(
            read_table(vocabulary_source, vocabulary_name), vocabulary_name
        )
        group_sizes = cls._load_group_sizes(
            read_table(frequency_source, frequency_name), frequency_name, vocabulary, logger
        )
        logger.info(
            "Loaded population table with %d dimensions, %d labels and %d groups",
            len(vocabulary),
            sum(len(labels) for labels in vocabulary),
            len(group_sizes),
        )
        return cls(vocabulary, group_sizes, field_order=field_order)

    @staticmethod
    def _load_vocabulary(table: pd.DataFrame, source: str) -> list[dict[str, int]]:
        if len(table) == 0:
            raise LoadError("Vocabulary is empty", source=source)
        _check_complete(table, 3, source)
        label_to_id: dict[int, dict[str, int]] = {}
        id_to_label: dict[int, dict[int, str]] = {}
        for row, (dimension, value_id, label) in enumerate(table.itertuples(index=False)):
            dimension = _parse_int(dimension, "Dimension", source, row)
            value_id = _parse_int(value_id, "Id", source, row)
            label = str(label)
            if dimension < 0:
                raise LoadError(f"Dimension ({dimension}) must be >= 0", source=source, row=row)
            labels = label_to_id.setdefault(dimension, {})
            ids = id_to_label.setdefault(dimension, {})
            if labels.get(label, value_id) != value_id:
                raise LoadError(
                    f"Label {label!r} of dimension {dimension} has ids {labels[label]} and {value_id}",
                    source=source,
                    row=row,
                )
            if ids.get(value_id, label) != label:
                raise LoadError(
                    f"Id {value_id} of dimension {dimension} has labels {ids[value_id]!r} and {label!r}",
                    source=source,
                    row=row,
                )
            labels[label] = value_id
            ids[value_id] = label
        num_dimensions = max(label_to_id) + 1
        for dimension in range(num_dimensions):
            if dimension not in label_to_id:
                raise LoadError(f"Dimension {dimension} has no vocabulary", source=source)
        return [label_to_id[dimension] for dimension in range(num_dimensions)]

    @staticmethod
    def _load_group_sizes(
        table: pd.DataFrame,
        source: str,
        vocabulary: list[dict[str, int]],
        logger: logging.Logger,
    ) -> dict[tuple[int, ...], float]:
        num_dimensions = len(vocabulary)
        _check_complete(table, num_dimensions + 1, source)
        known_ids = [set(labels.values()) for labels in vocabulary]
        group_sizes: dict[tuple[int, ...], float] = {}
        for row, values in enumerate(table.itertuples(index=False)):
            key = []
            for dimension in range(num_dimensions):
                value_id = _parse_int(values[dimension], f"Id of dimension {dimension}", source, row)
                if value_id not in known_ids[dimension]:
                    raise LoadError(
                        f"Id {value_id} is not in the vocabulary of dimension {dimension}",
                        source=source,
                        row=row,
                    )
                key.append(value_id)
            try:
                size = float(values[num_dimensions])
            except (TypeError, ValueError) as e:
                raise LoadError(
                    f"Group size ({values[num_dimensions]!r}) is not a number", source=source, row=row
                ) from e
            if not math.isfinite(size) or size < 0:
                raise LoadError(
                    f"Group size ({size}) must be finite and >= 0", source=source, row=row
                )
            key_tuple = tuple(key)
            if key_tuple in group_sizes:
                logger.warning(
                    "Group %s is defined more than once (%s, row %d), keeping the last size",
                    key_tuple,
                    source,
                    row,
                )
            group_sizes[key_tuple] = size
        return group_sizes

    @property
    def num_dimensions(self) -> int:
        return len(self._vocabulary)

    @property
    def field_order(self) -> tuple[int, ...]:
        return self._field_order

    def vocabulary(self, dimension: int) -> dict[str, int]:
        """Return a copy of the label to id mapping of a table dimension."""
        return dict(self._vocabulary[dimension])

    def __len__(self) -> int:
        return len(self._group_sizes)

    def lookup_group_size(self, labels: Sequence[Any]) -> float:
        """
        Return the population size of the group matching a record's labels.

        Parameters
        ----------
        labels : Sequence[Any]
            One label per record field, in record field order. Labels are
            compared as strings.

        Returns
        -------
        float
            The group size as loaded, or 0.0 if a label is unknown or the group
            is not in the table.

        Raises
        ------
        ValueError
            If the number of labels does not match the number of dimensions.
        """
        if len(labels) != len(self._vocabulary):
            raise ValueError(
                f"Expected {len(self._vocabulary)} labels, got {len(labels)}"
            )
        key = []
        for dimension, field in enumerate(self._field_order):
            value_id = self._vocabulary[dimension].get(str(labels[field]))
            if value_id is None:
                return 0.0
            key.append(value_id)
        return self._group_sizes.get(tuple(key), 0.0)

    def __repr__(self) -> str:
        return (
            f"PopulationFrequencyTable(num_dimensions={self.num_dimensions}, "
            f"num_groups={len(self)}, field_order={self._field_order})"
        )
