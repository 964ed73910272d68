import mimetypes
import os
import uuid
from werkzeug.utils import secure_filename
from flask import current_app

ALLOWED_EXTENSIONS = {'png', 'jpg', 'jpeg', 'gif', 'webp', 'svg', 'pdf', 'mp4', 'mov', 'avi', 'webm', 'mp3'}

def allowed_file(filename):
    return '.' in filename and filename.rsplit('.', 1)[1].lower() in ALLOWED_EXTENSIONS

def media_type_for(mime_type):
    major = (mime_type or "").split("/", 1)[0]
    return major if major in ("image", "video", "audio") else "file"


class LocalBlobStore:
    """Opaque key -> bytes store on the local disk, resolving keys to URLs."""

    disk = "local"

    def __init__(self, root, base_url):
        self.root = root
        self.base_url = base_url.rstrip("/")

    @classmethod
    def from_app(cls):
        return cls(
            current_app.config.get("UPLOAD_FOLDER", "uploads"),
            current_app.config.get("MEDIA_BASE_URL", "/uploads"),
        )

    def _absolute(self, path):
        root = self.root
        if not os.path.isabs(root):
            root = os.path.join(current_app.instance_path, root)
        return os.path.join(root, path)

    def put(self, path, data):
        file_path = self._absolute(path)
        os.makedirs(os.path.dirname(file_path), exist_ok=True)

        with open(file_path, "wb") as fh:
            fh.write(data)

        return self.url(path)

    def url(self, path):
        return f"{self.base_url}/{path}"

    def delete(self, path):
        file_path = self._absolute(path)
        if not os.path.exists(file_path):
            return False
        try:
            os.remove(file_path)
            return True
        except OSError as e:
            current_app.logger.error(f"Failed to delete file {file_path}: {e}")
            return False


def store_upload(file, store=None):
    """
    Writes an uploaded file to the blob store under a random name.

    Returns a dict of the Media columns describing the stored file.
    """
    if not file or not file.filename or not allowed_file(file.filename):
        raise ValueError("File type not allowed")

    store = store or LocalBlobStore.from_app()

    original_name = secure_filename(file.filename)
    ext = original_name.rsplit('.', 1)[1].lower()
    filename = f"{uuid.uuid4().hex}.{ext}"

    data = file.read()
    mime_type = file.mimetype or mimetypes.guess_type(original_name)[0] or "application/octet-stream"

    url = store.put(filename, data)

    return {
        "type": media_type_for(mime_type),
        "disk": store.disk,
        "filename": filename,
        "original_name": original_name,
        "mime_type": mime_type,
        "size": len(data),
        "path": filename,
        "url": url,
    }
