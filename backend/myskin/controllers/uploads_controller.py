"""
Uploads controller - serves files written by LocalFileStorage.
"""

from flask import Blueprint, send_from_directory

from myskin.core.config import get_upload_folder

uploads_bp = Blueprint("uploads", __name__, url_prefix="/uploads")


@uploads_bp.route("/<path:filename>", methods=["GET"])
def serve_upload(filename: str):
    # send_from_directory rejects paths that escape the upload folder
    return send_from_directory(get_upload_folder(), filename)
