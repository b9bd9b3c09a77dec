from marshmallow import Schema, ValidationError, fields, validate, validates_schema

from ..utils.helpers import validate_matrix_name

OPERATIONS = ('add', 'subtract', 'multiply')


def _matrix_name(value):
    valid, message = validate_matrix_name(value)
    if not valid:
        raise ValidationError(message)


class MatrixCreateSchema(Schema):
    """Either `content` in the text format, or `rows` and `cols` for an empty matrix"""
    name = fields.Str(required=True, validate=_matrix_name)
    content = fields.Str()
    rows = fields.Int(strict=True, validate=validate.Range(min=1))
    cols = fields.Int(strict=True, validate=validate.Range(min=1))
    overwrite = fields.Bool(load_default=False)

    @validates_schema
    def validate_source(self, data, **kwargs):
        has_content = 'content' in data
        has_shape = 'rows' in data or 'cols' in data
        if has_content and has_shape:
            raise ValidationError('Provide either content or rows/cols, not both')
        if not has_content and not ('rows' in data and 'cols' in data):
            raise ValidationError('Provide content, or both rows and cols')


class ElementSchema(Schema):
    value = fields.Int(strict=True, required=True)


class OperationSchema(Schema):
    operation = fields.Str(required=True, validate=validate.OneOf(OPERATIONS))
    left = fields.Str(required=True)
    right = fields.Str(required=True)
    result_name = fields.Str(validate=_matrix_name)


class TransposeSchema(Schema):
    result_name = fields.Str(validate=_matrix_name)
