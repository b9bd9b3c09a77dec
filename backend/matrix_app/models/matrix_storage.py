import logging
import os
import threading

from ..utils.errors import FormatError
from ..utils.helpers import utc_now
from ..utils.sparse_matrix import SparseMatrix
from ..utils.text_codec import COLS_PREFIX, ROWS_PREFIX, parse_dimension, significant_lines

logger = logging.getLogger(__name__)

FILE_EXTENSION = '.txt'


class MatrixExistsError(ValueError):
    """Raised when saving under a taken name without overwrite"""

    def __init__(self, name):
        super().__init__(f"Matrix {name} already exists")
        self.name = name


def read_matrix_file(file_path):
    """
    Load a stored matrix file.

    Matrices without non-zero elements are written as the two header
    lines only; those are read back as empty matrices of the declared
    size. Everything else goes through the regular parser.
    """
    with open(file_path, 'r', encoding='utf-8') as f:
        text = f.read()

    lines = significant_lines(text)
    if len(lines) == 2:
        return SparseMatrix(parse_dimension(lines[0], ROWS_PREFIX),
                            parse_dimension(lines[1], COLS_PREFIX))
    return SparseMatrix.from_text(text)


class MatrixStorage:
    """
    Named storage for sparse matrices.
    Keeps everything in memory and, when a storage directory is given,
    mirrors each matrix to `<name>.txt` in the text format.

    Every access to the name map holds the lock, so summaries never see
    a half-removed matrix.
    """

    def __init__(self, storage_dir=None):
        self.storage_dir = storage_dir
        self._lock = threading.RLock()
        self.matrices = {}
        self.metadata = {}

        if self.storage_dir:
            os.makedirs(self.storage_dir, exist_ok=True)
            self._load_data()

    def _file_path(self, name):
        return os.path.join(self.storage_dir, name + FILE_EXTENSION)

    def _load_data(self):
        """Load every matrix file from the storage directory, skipping unreadable ones"""
        for filename in sorted(os.listdir(self.storage_dir)):
            if not filename.endswith(FILE_EXTENSION):
                continue
            name = filename[:-len(FILE_EXTENSION)]
            try:
                matrix = read_matrix_file(os.path.join(self.storage_dir, filename))
            except (FormatError, UnicodeDecodeError, OSError) as e:
                logger.warning("Skipping %s: %s (%s)", filename, e, getattr(e, 'detail', None))
                continue
            self.matrices[name] = matrix
            self.metadata[name] = {'created_at': utc_now(), 'source': filename}

        logger.info("Loaded %d matrices from %s", len(self.matrices), self.storage_dir)

    def exists(self, name):
        with self._lock:
            return name in self.matrices

    def get_matrix(self, name):
        """Get a matrix by name, None if it does not exist"""
        with self._lock:
            return self.matrices.get(name)

    def save_matrix(self, name, matrix, source=None, overwrite=True):
        """
        Store a matrix under the given name.

        Raises:
            MatrixExistsError: If the name is taken and overwrite is False
        """
        with self._lock:
            if not overwrite and name in self.matrices:
                raise MatrixExistsError(name)
            self.matrices[name] = matrix
            self.metadata[name] = {'created_at': utc_now(), 'source': source}
            if self.storage_dir:
                matrix.save(self._file_path(name))
            summary = self._summary(name)

        logger.info("Stored matrix %s (%dx%d, %d non-zero)",
                    name, matrix.rows, matrix.cols, matrix.element_count)
        return summary

    def persist(self, name):
        """Write an already stored matrix back to disk after in-place changes"""
        with self._lock:
            if self.storage_dir and name in self.matrices:
                self.matrices[name].save(self._file_path(name))

    def delete_matrix(self, name):
        """Delete a matrix, returns False if it did not exist"""
        with self._lock:
            if name not in self.matrices:
                return False
            del self.matrices[name]
            del self.metadata[name]
            if self.storage_dir and os.path.exists(self._file_path(name)):
                os.remove(self._file_path(name))

        logger.info("Deleted matrix %s", name)
        return True

    def _summary(self, name):
        matrix = self.matrices[name]
        metadata = self.metadata[name]
        return {
            'name': name,
            'rows': matrix.rows,
            'cols': matrix.cols,
            'element_count': matrix.element_count,
            'density': matrix.get_density(),
            'source': metadata.get('source'),
            'created_at': metadata['created_at'].isoformat()
        }

    def describe(self, name):
        """Summary of a stored matrix, None if it does not exist"""
        with self._lock:
            if name not in self.matrices:
                return None
            return self._summary(name)

    def get_all_matrices(self):
        """Summaries of every stored matrix, ordered by name"""
        with self._lock:
            return [self._summary(name) for name in sorted(self.matrices)]

    def get_storage_stats(self):
        """Get storage statistics"""
        with self._lock:
            matrices = list(self.matrices.values())

        total_matrices = len(matrices)
        densities = [m.get_density() for m in matrices]

        return {
            'total_matrices': total_matrices,
            'total_non_zero_elements': sum(m.element_count for m in matrices),
            'average_density': sum(densities) / total_matrices if total_matrices else 0,
            'persistent': bool(self.storage_dir),
            'storage_dir': self.storage_dir
        }
