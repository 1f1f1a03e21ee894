"""
Tabular data container for pyinfluence.

DataSource is the "I have data" abstraction: an n x p matrix of floats
with optional unique column labels. It doesn't know or care whether it
feeds an OLS fit or a forward-stagewise run. It just provides data.

Usage:
    from pyinfluence import DataSource

    ds = DataSource.from_arrays(X, columns=['air', 'temp', 'acid'])
    ds = DataSource.from_file("data.csv")
    ds = DataSource.from_dataframe(df)

    ds.dimensions()          # (21, 3)
    ds.column('temp')        # copy of one column
    ds.standardize_columns() # in place

Shape is fixed at construction: mutation replaces values, never resizes.
Operations that change the shape (remove_row) return a new container.
"""

from __future__ import annotations

from collections import Counter
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Iterator, Sequence, TYPE_CHECKING
import numpy as np
from numpy.typing import ArrayLike, NDArray

from pyinfluence.core.exceptions import ValidationError, DimensionError
from pyinfluence.core.validation import (
    check_array,
    check_finite,
    check_2d,
    check_1d,
)

if TYPE_CHECKING:
    import pandas as pd


ColumnKey = int | str


@dataclass(eq=False)
class DataSource:
    """
    Labeled n x p numeric table. Domain-agnostic.

    Construct via factory classmethods, not directly.
    """
    _data: NDArray[np.floating[Any]]
    _labels: tuple[str, ...] | None = None
    _metadata: dict[str, Any] = field(default_factory=dict)
    _index: dict[str, int] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        check_2d(self._data, 'data')
        if self._labels is not None:
            if len(self._labels) != self._data.shape[1]:
                raise DimensionError(
                    f"columns: got {len(self._labels)} labels for "
                    f"{self._data.shape[1]} columns"
                )
            dupes = sorted(c for c, count in Counter(self._labels).items() if count > 1)
            if dupes:
                raise ValidationError(f"columns: duplicate labels {dupes}")
            self._index = {label: i for i, label in enumerate(self._labels)}
        else:
            self._index = {}

    # === Shape ===

    def dimensions(self) -> tuple[int, int]:
        """Return (rows, cols)."""
        n, p = self._data.shape
        return n, p

    @property
    def n_observations(self) -> int:
        """Number of rows."""
        return self._data.shape[0]

    @property
    def n_columns(self) -> int:
        """Number of columns."""
        return self._data.shape[1]

    @property
    def labels(self) -> tuple[str, ...] | None:
        """Column labels, or None for an unlabeled table."""
        return self._labels

    @property
    def metadata(self) -> dict[str, Any]:
        """Provenance metadata (source kind, file path, ...)."""
        return self._metadata.copy()

    # === Column / row access ===

    def column_index(self, key: ColumnKey) -> int:
        """
        Resolve a column label or integer position to a position.

        Raises:
            KeyError: Unknown label, with the available labels listed
            IndexError: Position out of range
            TypeError: Key is neither a str nor an integer
        """
        if isinstance(key, str):
            if key not in self._index:
                available = list(self._labels) if self._labels else []
                raise KeyError(
                    f"DataSource has no column '{key}'. Available: {available}"
                )
            return self._index[key]

        if isinstance(key, bool) or not isinstance(key, (int, np.integer)):
            raise TypeError(
                f"column key must be a label or an integer position, got {key!r}"
            )
        index = int(key)
        p = self.n_columns
        if not -p <= index < p:
            raise IndexError(f"column index {index} out of range for {p} columns")
        return index % p

    def column(self, key: ColumnKey) -> NDArray[np.floating[Any]]:
        """Return a copy of one column (length n)."""
        return self._data[:, self.column_index(key)].copy()

    def columns(self, keys: Sequence[ColumnKey] | None = None) -> NDArray[np.floating[Any]]:
        """Return a copy of several columns as an (n, k) matrix (all by default)."""
        if keys is None:
            return self._data.copy()
        idx = [self.column_index(k) for k in keys]
        return self._data[:, idx].copy()

    def set_column(self, key: ColumnKey, values: ArrayLike) -> None:
        """
        Replace one column in place.

        Raises:
            DimensionError: If values does not have length n
            ValidationError: If values are non-numeric or non-finite
        """
        index = self.column_index(key)
        arr = check_array(values, 'values')
        check_1d(arr, 'values')
        if arr.shape[0] != self.n_observations:
            raise DimensionError(
                f"values: expected length {self.n_observations}, got {arr.shape[0]}"
            )
        check_finite(arr, 'values')
        self._data[:, index] = arr

    def row(self, index: int) -> NDArray[np.floating[Any]]:
        """Return a copy of one row (length p)."""
        n = self.n_observations
        if not -n <= index < n:
            raise IndexError(f"row index {index} out of range for {n} rows")
        return self._data[index, :].copy()

    def __getitem__(self, key: ColumnKey) -> NDArray[np.floating[Any]]:
        """Column access by label or position (copy)."""
        return self.column(key)

    def __contains__(self, key: object) -> bool:
        """Check if a column label exists."""
        return key in self._index

    def to_numpy(self) -> NDArray[np.floating[Any]]:
        """Copy of the full (n, p) matrix."""
        return self._data.copy()

    def to_dataframe(self) -> 'pd.DataFrame':
        """Convert to a pandas DataFrame (labels, or x0..x{p-1})."""
        import pandas as pd
        return pd.DataFrame(self._data.copy(), columns=list(self._column_names()))

    def _column_names(self) -> tuple[str, ...]:
        if self._labels is not None:
            return self._labels
        return tuple(f"x{i}" for i in range(self.n_columns))

    # === Transforms (in place) ===

    def transform(self, func: Callable[[float], float], *keys: ColumnKey) -> None:
        """
        Apply a scalar function elementwise to the given columns, in place.

        With no keys the function is applied to every column.
        """
        targets = [self.column_index(k) for k in keys] if keys else list(range(self.n_columns))
        vectorised = np.vectorize(func, otypes=[np.float64])
        values = vectorised(self._data[:, targets])
        # all-or-nothing: a bad value leaves the container untouched
        check_finite(values, 'transform result')
        self._data[:, targets] = values

    def standardize_columns(self) -> None:
        """
        Scale every column to zero mean and unit sample variance, in place.

        Constant columns have no scale to divide by and become all zeros.
        """
        means = self._data.mean(axis=0)
        sds = self._data.std(axis=0, ddof=1) if self.n_observations > 1 else np.zeros(self.n_columns)
        centered = self._data - means
        safe = np.where(sds > 0, sds, 1.0)
        self._data[:] = np.where(sds > 0, centered / safe, 0.0)

    def normalize_columns(self) -> None:
        """
        Min-max scale every column to [0, 1], in place.

        Constant columns become all zeros.
        """
        lo = self._data.min(axis=0)
        span = self._data.max(axis=0) - lo
        safe = np.where(span > 0, span, 1.0)
        self._data[:] = np.where(span > 0, (self._data - lo) / safe, 0.0)

    # === Reductions ===

    def apply(
        self,
        func: Callable[[NDArray[np.floating[Any]]], float],
        axis: int = 0,
        *indices: ColumnKey,
    ) -> NDArray[np.floating[Any]]:
        """
        Reduce columns (axis=0) or rows (axis=1) with func.

        Args:
            func: Maps a 1-D vector to a scalar
            axis: 0 applies func to each selected column, 1 to each selected row
            *indices: Columns (labels or positions) or row positions; all if omitted

        Returns:
            One value per selected column/row, in the order given
        """
        if axis == 0:
            targets = indices if indices else range(self.n_columns)
            return np.array([float(func(self.column(k))) for k in targets])
        if axis == 1:
            targets = indices if indices else range(self.n_observations)
            return np.array([float(func(self.row(int(i)))) for i in targets])
        raise ValueError(f"axis must be 0 (columns) or 1 (rows), got {axis!r}")

    # === Copies and scoped checkout ===

    def copy(self) -> DataSource:
        """Deep copy (data, labels and metadata)."""
        return DataSource(
            _data=self._data.copy(),
            _labels=self._labels,
            _metadata=self._metadata.copy(),
        )

    def remove_row(self, index: int) -> DataSource:
        """
        Return a new container without row `index`. The original is untouched.
        """
        n = self.n_observations
        if not -n <= index < n:
            raise IndexError(f"row index {index} out of range for {n} rows")
        metadata = self._metadata.copy()
        metadata['removed_row'] = index % n
        return DataSource(
            _data=np.delete(self._data, index, axis=0),
            _labels=self._labels,
            _metadata=metadata,
        )

    def snapshot(self) -> NDArray[np.floating[Any]]:
        """Copy of the current contents, for a later restore()."""
        return self._data.copy()

    def restore(self, snapshot: NDArray[np.floating[Any]]) -> None:
        """
        Copy a snapshot back into the container, bit for bit.

        Raises:
            DimensionError: If the snapshot shape differs from the container
        """
        if snapshot.shape != self._data.shape:
            raise DimensionError(
                f"snapshot: shape {snapshot.shape} does not match container {self._data.shape}"
            )
        np.copyto(self._data, snapshot)

    @contextmanager
    def checkout(self) -> Iterator[DataSource]:
        """
        Scoped mutation: contents are restored on every exit path.

            with ds.checkout():
                ds.set_column(0, zeros)
                ...
            # ds is back to its pre-checkout contents here
        """
        saved = self.snapshot()
        try:
            yield self
        finally:
            self.restore(saved)

    # === Factory Methods ===

    @classmethod
    def from_arrays(
        cls,
        data: ArrayLike,
        *,
        columns: Sequence[str] | None = None,
    ) -> DataSource:
        """
        Construct from an (n, p) array. A 1-D array becomes a single column.

        The array is copied; later changes to `data` do not leak in.
        """
        arr = check_array(data, 'data')
        if arr.ndim == 1:
            arr = arr.reshape(-1, 1)
        check_2d(arr, 'data')
        check_finite(arr, 'data')
        labels = tuple(str(c) for c in columns) if columns is not None else None
        return cls(
            _data=np.array(arr, dtype=np.float64, copy=True),
            _labels=labels,
            _metadata={'source': 'arrays'},
        )

    @classmethod
    def from_rows(
        cls,
        rows: Sequence[Sequence[float]],
        *,
        columns: Sequence[str] | None = None,
    ) -> DataSource:
        """Construct from a sequence of equal-length rows."""
        lengths = {len(r) for r in rows}
        if len(lengths) > 1:
            raise DimensionError(f"rows: inconsistent row lengths {sorted(lengths)}")
        ds = cls.from_arrays(rows, columns=columns)
        ds._metadata['source'] = 'rows'
        return ds

    @classmethod
    def from_file(cls, path: str | Path, *, columns: list[str] | None = None) -> DataSource:
        """Construct from file (CSV, TSV, NPY)."""
        path = Path(path)
        suffix = path.suffix.lower()

        if suffix in ('.csv', '.tsv'):
            import pandas as pd
            sep = '\t' if suffix == '.tsv' else ','
            df = pd.read_csv(path, usecols=columns, sep=sep)
            return cls.from_dataframe(df, source_path=str(path))
        elif suffix == '.npy':
            data = np.load(path)
            ds = cls.from_arrays(data, columns=columns)
            ds._metadata.update(source='file', source_path=str(path))
            return ds
        else:
            raise ValidationError(f"Unknown file format: {suffix}")

    @classmethod
    def from_dataframe(cls, df: 'pd.DataFrame', *, source_path: str | None = None) -> DataSource:
        """Construct from a pandas DataFrame; column names become labels."""
        data = check_array(df.to_numpy(), 'df')
        check_finite(data, 'df')

        metadata: dict[str, Any] = {'source': 'dataframe'}
        if source_path:
            metadata['source'] = 'file'
            metadata['source_path'] = source_path

        return cls(
            _data=np.array(data, dtype=np.float64, copy=True),
            _labels=tuple(str(c) for c in df.columns),
            _metadata=metadata,
        )

    @classmethod
    def build(cls, *args, **kwargs) -> DataSource:
        """
        Convenience factory that dispatches to the appropriate from_* method.

        Examples:
            DataSource.build(X, columns=['a', 'b'])   # from_arrays
            DataSource.build("data.csv")              # from_file
            DataSource.build(df)                      # from_dataframe
        """
        if args and isinstance(args[0], (str, Path)):
            return cls.from_file(args[0], **kwargs)
        if args and hasattr(args[0], 'columns') and hasattr(args[0], 'to_numpy'):
            return cls.from_dataframe(args[0], **kwargs)
        return cls.from_arrays(*args, **kwargs)
