"""
Tests for the DataSource container.

Validates:
    - Factories (arrays, rows, DataFrame, CSV/NPY files, build dispatch)
    - Column/row access by label and position
    - In-place transforms (transform, standardize, normalize) and apply()
    - remove_row returns a new container
    - snapshot/restore/checkout restore contents bit for bit
"""

import numpy as np
import pandas as pd
import pytest

from pyinfluence import DataSource
from pyinfluence.core.exceptions import DimensionError, ValidationError


@pytest.fixture
def table():
    data = np.array([
        [1.0, 10.0, 5.0],
        [2.0, 20.0, 5.0],
        [3.0, 30.0, 5.0],
        [4.0, 40.0, 5.0],
    ])
    return DataSource.from_arrays(data, columns=['a', 'b', 'c'])


# ═══════════════════════════════════════════════════════════════════════
# Construction
# ═══════════════════════════════════════════════════════════════════════


class TestConstruction:

    def test_from_arrays_copies(self):
        data = np.ones((3, 2))
        ds = DataSource.from_arrays(data)
        data[0, 0] = 99.0
        assert ds.column(0)[0] == 1.0

    def test_1d_becomes_single_column(self):
        assert DataSource.from_arrays([1, 2, 3]).dimensions() == (3, 1)

    def test_unlabeled(self):
        ds = DataSource.from_arrays(np.zeros((2, 2)))
        assert ds.labels is None
        assert list(ds.to_dataframe().columns) == ['x0', 'x1']

    def test_from_rows(self):
        ds = DataSource.from_rows([[1, 2], [3, 4], [5, 6]], columns=['u', 'v'])
        assert ds.dimensions() == (3, 2)
        np.testing.assert_array_equal(ds['v'], [2, 4, 6])
        assert ds.metadata['source'] == 'rows'

    def test_from_rows_ragged(self):
        with pytest.raises(DimensionError, match="inconsistent row lengths"):
            DataSource.from_rows([[1, 2], [3]])

    def test_duplicate_labels(self):
        with pytest.raises(ValidationError, match="duplicate labels \\['a'\\]"):
            DataSource.from_arrays(np.zeros((2, 3)), columns=['a', 'b', 'a'])

    def test_label_count_mismatch(self):
        with pytest.raises(DimensionError):
            DataSource.from_arrays(np.zeros((2, 3)), columns=['a', 'b'])

    def test_non_finite_rejected(self):
        with pytest.raises(ValidationError, match="non-finite"):
            DataSource.from_arrays([[1.0, np.nan]])

    def test_from_dataframe(self):
        df = pd.DataFrame({'x': [1.0, 2.0], 'y': [3.0, 4.0]})
        ds = DataSource.from_dataframe(df)
        assert ds.labels == ('x', 'y')
        np.testing.assert_array_equal(ds.to_numpy(), df.to_numpy())

    def test_from_dataframe_non_numeric(self):
        df = pd.DataFrame({'x': [1.0, 2.0], 'name': ['p', 'q']})
        with pytest.raises(ValidationError):
            DataSource.from_dataframe(df)

    def test_from_csv(self, tmp_path):
        path = tmp_path / "data.csv"
        pd.DataFrame({'x': [1.0, 2.0], 'y': [3.0, 4.0]}).to_csv(path, index=False)
        ds = DataSource.from_file(path)
        assert ds.labels == ('x', 'y')
        assert ds.metadata['source_path'] == str(path)

    def test_from_npy(self, tmp_path):
        path = tmp_path / "data.npy"
        np.save(path, np.arange(6.0).reshape(3, 2))
        ds = DataSource.from_file(path, columns=['p', 'q'])
        np.testing.assert_array_equal(ds['q'], [1.0, 3.0, 5.0])

    def test_unknown_file_format(self, tmp_path):
        with pytest.raises(ValidationError, match="Unknown file format"):
            DataSource.from_file(tmp_path / "data.xlsx")

    def test_build_dispatch(self):
        df = pd.DataFrame({'x': [1.0, 2.0]})
        assert DataSource.build(df).labels == ('x',)
        assert DataSource.build(np.zeros((2, 2)), columns=['a', 'b']).labels == ('a', 'b')


# ═══════════════════════════════════════════════════════════════════════
# Access
# ═══════════════════════════════════════════════════════════════════════


class TestAccess:

    def test_dimensions(self, table):
        assert table.dimensions() == (4, 3)
        assert table.n_observations == 4
        assert table.n_columns == 3

    def test_column_by_label_and_position(self, table):
        np.testing.assert_array_equal(table.column('b'), table.column(1))
        np.testing.assert_array_equal(table.column(-1), [5.0] * 4)

    def test_column_is_copy(self, table):
        col = table.column('a')
        col[:] = 0.0
        assert table.column('a')[0] == 1.0

    def test_columns_subset(self, table):
        assert table.columns(['c', 'a']).shape == (4, 2)
        np.testing.assert_array_equal(table.columns(['c', 'a'])[:, 1], [1, 2, 3, 4])

    def test_row(self, table):
        np.testing.assert_array_equal(table.row(1), [2.0, 20.0, 5.0])

    def test_unknown_label(self, table):
        with pytest.raises(KeyError, match="Available"):
            table.column('zzz')

    def test_index_out_of_range(self, table):
        with pytest.raises(IndexError):
            table.column(3)
        with pytest.raises(IndexError):
            table.row(4)

    @pytest.mark.parametrize("key", [1.7, 1.0, True, None])
    def test_non_integer_position_rejected(self, table, key):
        with pytest.raises(TypeError, match="integer position"):
            table.column(key)

    def test_numpy_integer_position(self, table):
        np.testing.assert_array_equal(table.column(np.int64(1)), table.column(1))

    def test_contains(self, table):
        assert 'a' in table
        assert 'zzz' not in table

    def test_set_column(self, table):
        table.set_column('c', [0.0, 1.0, 2.0, 3.0])
        np.testing.assert_array_equal(table['c'], [0.0, 1.0, 2.0, 3.0])

    def test_set_column_wrong_length(self, table):
        with pytest.raises(DimensionError, match="expected length 4"):
            table.set_column('c', [1.0, 2.0])

    def test_to_dataframe(self, table):
        df = table.to_dataframe()
        assert list(df.columns) == ['a', 'b', 'c']
        assert df.shape == (4, 3)


# ═══════════════════════════════════════════════════════════════════════
# Transforms and reductions
# ═══════════════════════════════════════════════════════════════════════


class TestTransforms:

    def test_transform_selected_columns(self, table):
        table.transform(lambda v: v * 2, 'a')
        np.testing.assert_array_equal(table['a'], [2.0, 4.0, 6.0, 8.0])
        np.testing.assert_array_equal(table['b'], [10.0, 20.0, 30.0, 40.0])

    def test_transform_all_or_nothing(self, table):
        before = table.to_numpy()
        with pytest.raises(ValidationError):
            table.transform(lambda v: np.log(v - 3.0), 'a', 'b')
        np.testing.assert_array_equal(table.to_numpy(), before)

    def test_standardize(self, table):
        table.standardize_columns()
        data = table.to_numpy()
        np.testing.assert_allclose(data[:, :2].mean(axis=0), 0.0, atol=1e-12)
        np.testing.assert_allclose(data[:, :2].std(axis=0, ddof=1), 1.0)
        # constant column
        np.testing.assert_array_equal(data[:, 2], 0.0)

    def test_normalize(self, table):
        table.normalize_columns()
        np.testing.assert_allclose(table['b'], [0.0, 1 / 3, 2 / 3, 1.0])
        np.testing.assert_array_equal(table['c'], 0.0)

    def test_apply_columns(self, table):
        np.testing.assert_array_equal(table.apply(np.mean), [2.5, 25.0, 5.0])
        np.testing.assert_array_equal(table.apply(np.max, 0, 'b'), [40.0])

    def test_apply_rows(self, table):
        np.testing.assert_array_equal(table.apply(np.sum, 1, 0, 3), [16.0, 49.0])

    def test_apply_bad_axis(self, table):
        with pytest.raises(ValueError, match="axis"):
            table.apply(np.sum, 2)


# ═══════════════════════════════════════════════════════════════════════
# Copies and checkout
# ═══════════════════════════════════════════════════════════════════════


class TestCopies:

    def test_remove_row_leaves_original(self, table):
        smaller = table.remove_row(1)
        assert smaller.dimensions() == (3, 3)
        assert table.dimensions() == (4, 3)
        np.testing.assert_array_equal(smaller['a'], [1.0, 3.0, 4.0])
        assert smaller.labels == table.labels
        assert smaller.metadata['removed_row'] == 1

    def test_copy_is_independent(self, table):
        clone = table.copy()
        clone.set_column('a', np.zeros(4))
        assert table['a'][0] == 1.0

    def test_checkout_restores_on_error(self, table):
        before = table.to_numpy()
        with pytest.raises(RuntimeError):
            with table.checkout():
                table.set_column('b', np.zeros(4))
                raise RuntimeError("boom")
        assert table.to_numpy().tobytes() == before.tobytes()

    def test_restore_shape_mismatch(self, table):
        with pytest.raises(DimensionError):
            table.restore(np.zeros((2, 2)))
