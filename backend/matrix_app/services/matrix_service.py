import logging

from marshmallow import ValidationError

from .schemas import ElementSchema, MatrixCreateSchema, OperationSchema, TransposeSchema
from ..models.matrix_storage import MatrixExistsError
from ..utils.helpers import validate_matrix_name
from ..utils.sparse_matrix import SparseMatrix

logger = logging.getLogger(__name__)


class MatrixNotFoundError(LookupError):
    """Raised when a matrix name is not in storage"""

    def __init__(self, name):
        super().__init__(f"Matrix not found: {name}")
        self.name = name


class MatrixService:
    """Service for matrix operations on top of the named matrix storage"""

    def __init__(self, storage, dense_view_limit=400):
        self.storage = storage
        self.dense_view_limit = dense_view_limit

    def get_all_matrices(self):
        """Summaries of every stored matrix"""
        return self.storage.get_all_matrices()

    def get_matrix(self, name):
        """Get a stored matrix or raise MatrixNotFoundError"""
        matrix = self.storage.get_matrix(name)
        if matrix is None:
            raise MatrixNotFoundError(name)
        return matrix

    def describe_matrix(self, name, include_dense=False):
        """Summary plus the non-zero entries of a matrix"""
        matrix = self.get_matrix(name)
        details = self.storage.describe(name)
        if details is None:
            raise MatrixNotFoundError(name)
        details['elements'] = [
            {'row': r, 'col': c, 'value': v} for r, c, v in matrix.non_zero_elements()
        ]
        if include_dense:
            if matrix.rows * matrix.cols > self.dense_view_limit:
                raise ValidationError(
                    f"Dense view is limited to {self.dense_view_limit} cells, "
                    f"matrix has {matrix.rows * matrix.cols}"
                )
            details['dense'] = matrix.to_dense()
        return details

    def _save_new(self, name, matrix, source, overwrite):
        # existence is checked by the storage under its lock
        try:
            return self.storage.save_matrix(name, matrix, source=source, overwrite=overwrite)
        except MatrixExistsError as e:
            raise ValidationError(str(e)) from e

    def create_matrix(self, data):
        """Create a matrix from text content or from explicit dimensions"""
        payload = MatrixCreateSchema().load(data)

        if 'content' in payload:
            matrix = SparseMatrix.from_text(payload['content'])
            source = 'text'
        else:
            matrix = SparseMatrix(payload['rows'], payload['cols'])
            source = 'empty'

        return self._save_new(payload['name'], matrix, source, payload['overwrite'])

    def load_matrix_text(self, name, content, source=None, overwrite=False):
        """Parse uploaded text and store it under the given name"""
        valid, message = validate_matrix_name(name)
        if not valid:
            raise ValidationError(message)

        matrix = SparseMatrix.from_text(content)
        return self._save_new(name, matrix, source, overwrite)

    def get_matrix_text(self, name):
        """Text serialization of a stored matrix"""
        return self.get_matrix(name).to_text()

    def delete_matrix(self, name):
        if not self.storage.delete_matrix(name):
            raise MatrixNotFoundError(name)

    def get_element(self, name, row, col):
        matrix = self.get_matrix(name)
        return {'row': row, 'col': col, 'value': matrix.get_element(row, col)}

    def set_element(self, name, row, col, data):
        """Write one element in place; zero removes it"""
        payload = ElementSchema().load(data)
        matrix = self.get_matrix(name)
        matrix.set_element(row, col, payload['value'])
        self.storage.persist(name)
        return {
            'row': row,
            'col': col,
            'value': matrix.get_element(row, col),
            'element_count': matrix.element_count
        }

    def run_operation(self, data):
        """
        Apply add, subtract or multiply to two stored matrices.

        The result is stored when `result_name` is given; otherwise it is
        only returned.
        """
        payload = OperationSchema().load(data)
        left = self.get_matrix(payload['left'])
        right = self.get_matrix(payload['right'])

        operation = getattr(left, payload['operation'])
        result = operation(right)
        logger.debug("%s(%s, %s) -> %r", payload['operation'],
                     payload['left'], payload['right'], result)

        return self._store_result(result, payload.get('result_name'), payload['operation'])

    def transpose(self, name, data):
        payload = TransposeSchema().load(data or {})
        result = self.get_matrix(name).transpose()
        return self._store_result(result, payload.get('result_name'), 'transpose')

    def _store_result(self, result, result_name, source):
        if result_name:
            summary = self.storage.save_matrix(result_name, result, source=source)
        else:
            summary = {
                'name': None,
                'rows': result.rows,
                'cols': result.cols,
                'element_count': result.element_count,
                'density': result.get_density(),
            }
        summary['text'] = result.to_text()
        return summary

    def get_storage_stats(self):
        """Get storage statistics"""
        return self.storage.get_storage_stats()
