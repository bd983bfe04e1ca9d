"""
Tests for the population frequency table
"""

import logging

import pandas as pd
import pytest

from profitability_anonymize.constants import CENSUS_2010_FIELD_ORDER
from profitability_anonymize.exceptions import ConfigurationError, LoadError
from profitability_anonymize.population import PopulationFrequencyTable
from tests.shared import (
    FREQUENCY_ROWS,
    RECORD_TO_TABLE_FIELD_ORDER,
    VOCABULARY_ROWS,
    make_population,
    write_table,
)

_LOGGER = logging.getLogger(__name__)


class TestPopulationFrequencyTableLoad:
    """
    Tests for loading population tables from files and DataFrames
    """

    def test_build_from_files(self, tmp_path):
        vocabulary = write_table(tmp_path / "vocabulary.csv", VOCABULARY_ROWS)
        frequencies = write_table(tmp_path / "frequencies.csv", FREQUENCY_ROWS)
        table = PopulationFrequencyTable.build(
            vocabulary, frequencies, field_order=RECORD_TO_TABLE_FIELD_ORDER, logger=_LOGGER
        )
        assert table.num_dimensions == 2
        assert len(table) == len(FREQUENCY_ROWS)
        assert table.vocabulary(0) == {"M": 0, "F": 1}
        assert table.lookup_group_size(("34", "F")) == 90.0

    def test_build_from_dataframes(self):
        table = make_population()
        assert len(table) == len(FREQUENCY_ROWS)
        assert table.field_order == RECORD_TO_TABLE_FIELD_ORDER

    def test_logs_size(self, caplog):
        with caplog.at_level(logging.INFO):
            make_population()
        assert "Loaded population table with 2 dimensions, 6 labels and 7 groups" in caplog.text

    def test_empty_file(self, tmp_path):
        vocabulary = tmp_path / "vocabulary.csv"
        vocabulary.write_text("")
        frequencies = write_table(tmp_path / "frequencies.csv", FREQUENCY_ROWS)
        with pytest.raises(LoadError):
            PopulationFrequencyTable.build(str(vocabulary), frequencies)

    def test_ragged_file(self, tmp_path):
        vocabulary = write_table(tmp_path / "vocabulary.csv", VOCABULARY_ROWS + [(1, 4, "50", "x")])
        frequencies = write_table(tmp_path / "frequencies.csv", FREQUENCY_ROWS)
        with pytest.raises(LoadError):
            PopulationFrequencyTable.build(vocabulary, frequencies)

    def test_missing_field(self, tmp_path):
        vocabulary = write_table(tmp_path / "vocabulary.csv", VOCABULARY_ROWS)
        frequencies = tmp_path / "frequencies.csv"
        frequencies.write_text("0;0;1.0\n1;0\n")
        with pytest.raises(LoadError) as e:
            PopulationFrequencyTable.build(vocabulary, str(frequencies))
        assert e.value.row == 1
        assert e.value.source == str(frequencies)
        assert f"({frequencies}, row 1)" in str(e.value)

    @pytest.mark.parametrize(
        "vocabulary_rows",
        [
            [(0, 0, "M"), (0, 1)],
            [(0, "x", "M")],
            [(0, 1.5, "M")],
            [(-1, 0, "M")],
            [(0, 0, "M"), (0, 1, "M")],
            [(0, 0, "M"), (0, 0, "F")],
            [(1, 0, "M")],
            [],
        ],
    )
    def test_malformed_vocabulary(self, vocabulary_rows):
        with pytest.raises(LoadError):
            PopulationFrequencyTable.build(pd.DataFrame(vocabulary_rows), pd.DataFrame([(0, 1.0)]))

    def test_repeated_vocabulary_row(self):
        table = PopulationFrequencyTable.build(
            pd.DataFrame([(0, 0, "M"), (0, 0, "M")]), pd.DataFrame([(0, 3.0)])
        )
        assert table.lookup_group_size(("M",)) == 3.0

    @pytest.mark.parametrize(
        "frequency_rows",
        [
            [(0, 0)],
            [(0, 0, 1.0, 2.0)],
            [(0, 9, 1.0)],
            [(2, 0, 1.0)],
            [(0, 0, -1.0)],
            [(0, 0, float("nan"))],
            [(0, 0, "many")],
        ],
    )
    def test_malformed_frequencies(self, frequency_rows):
        with pytest.raises(LoadError):
            PopulationFrequencyTable.build(
                pd.DataFrame(VOCABULARY_ROWS), pd.DataFrame(frequency_rows)
            )

    def test_duplicate_group_keeps_last(self, caplog):
        with caplog.at_level(logging.WARNING):
            table = PopulationFrequencyTable.build(
                pd.DataFrame(VOCABULARY_ROWS),
                pd.DataFrame([(0, 0, 1.0), (0, 0, 7.0)]),
                field_order=RECORD_TO_TABLE_FIELD_ORDER,
            )
        assert table.lookup_group_size(("31", "M")) == 7.0
        assert "defined more than once" in caplog.text

    def test_field_order_not_a_permutation(self):
        with pytest.raises(ConfigurationError):
            make_population(field_order=(0, 0))
        with pytest.raises(ConfigurationError):
            make_population(field_order=(0, 1, 2))


class TestPopulationFrequencyTableLookup:
    """
    Tests for lookup_group_size
    """

    def setup_method(self):
        self.table = make_population()

    def test_present_exactly_once(self):
        for sex_id, age_id, size in FREQUENCY_ROWS:
            age = next(label for d, i, label in VOCABULARY_ROWS if d == 1 and i == age_id)
            sex = next(label for d, i, label in VOCABULARY_ROWS if d == 0 and i == sex_id)
            actual = self.table.lookup_group_size((age, sex))
            assert actual == size, f"{actual} != {size} for {(age, sex)}"

    def test_absent_tuple(self):
        actual = self.table.lookup_group_size(("47", "F"))
        assert actual == 0.0 and isinstance(actual, float)

    def test_unknown_label(self):
        assert self.table.lookup_group_size(("99", "M")) == 0.0
        assert self.table.lookup_group_size(("31", "X")) == 0.0

    def test_labels_compared_as_strings(self):
        assert self.table.lookup_group_size((31, "M")) == 1.0

    def test_wrong_number_of_labels(self):
        with pytest.raises(ValueError):
            self.table.lookup_group_size(("31",))

    def test_field_order_mapping(self):
        """Record fields are permuted into table dimension order, not used positionally."""
        identity = make_population(field_order=None)
        assert identity.lookup_group_size(("M", "34")) == 80.0
        assert identity.lookup_group_size(("34", "M")) == 0.0
        assert self.table.lookup_group_size(("34", "M")) == 80.0
        assert self.table.lookup_group_size(("M", "34")) == 0.0


class TestCensus2010FieldOrder:
    """
    Tests for the layout of the census 2010 tables
    """

    def test_value(self):
        actual = CENSUS_2010_FIELD_ORDER
        expected = (3, 0, 2, 1)
        assert actual == expected, f"{actual} != {expected}"

    def test_lookup(self):
        # Table dimensions: race, sex, age, zip
        vocabulary = [
            (0, 0, "white"),
            (0, 1, "black"),
            (1, 0, "M"),
            (1, 1, "F"),
            (2, 0, "34"),
            (3, 0, "02139"),
            (3, 1, "90210"),
        ]
        frequencies = [
            (1, 1, 0, 0, 12.0),
            (0, 0, 0, 1, 5.0),
        ]
        table = PopulationFrequencyTable.build(
            pd.DataFrame(vocabulary),
            pd.DataFrame(frequencies),
            field_order=CENSUS_2010_FIELD_ORDER,
        )
        # Records: sex, zip, age, race
        assert table.lookup_group_size(("F", "02139", "34", "black")) == 12.0
        assert table.lookup_group_size(("M", "90210", "34", "white")) == 5.0
        assert table.lookup_group_size(("M", "02139", "34", "black")) == 0.0
