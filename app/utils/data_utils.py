"""
Data utilities
Helper functions cho data transformation và validation
"""
from flask import request


def get_request_data():
    """Lấy request data từ JSON hoặc form."""
    if request.is_json:
        data = request.get_json(silent=True)
        return data if isinstance(data, dict) else {}
    return request.form.to_dict()


def get_text_field(data, key, default=''):
    """Lấy trường chuỗi từ payload, giá trị khác kiểu được chuyển thành chuỗi."""
    value = data.get(key, default)
    if value is None:
        return default
    if not isinstance(value, str):
        return str(value)
    return value

