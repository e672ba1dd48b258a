from __future__ import annotations

from flask import jsonify


def ok(data, status: int = 200):
    return jsonify(data), status


def created(data):
    return jsonify(data), 201


def no_content():
    return "", 204


def paginated(items, total: int, page: int, page_size: int):
    return jsonify({"items": items, "total": total, "page": page, "pageSize": page_size}), 200
