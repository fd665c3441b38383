import uuid

from integrations.storage.client import CloudinaryClient
from integrations.storage.exceptions import RemoteServiceError


class FakeCloudinaryClient(CloudinaryClient):
    """
    In-memory stand-in for the Cloudinary service. Signing and URL building
    still go through the real SDK; only network calls are replaced.
    Images always come back in `format`, like Cloudinary normalizing uploads.
    """

    def __init__(self, format="jpg", width=100, height=67):
        super().__init__()
        self.format = format
        self.width = width
        self.height = height
        self.resources = {}
        self.remote_files = {}
        self.calls = []

    def _content(self, file):
        if isinstance(file, bytes):
            return file
        if isinstance(file, str):
            if file.startswith(("http://", "https://", "ftp:")):
                return self.remote_files.get(file, b"")
            with open(file, "rb") as f:
                return f.read()
        return file.read()

    def _store(self, content, options):
        resource_type = options.get("resource_type", "image")
        type = options.get("type", "upload")
        public_id = options.get("public_id")
        if not public_id:
            public_id = uuid.uuid4().hex[:20]
            if options.get("folder"):
                public_id = f"{options['folder']}/{public_id}"

        resource = {
            "public_id": public_id,
            "resource_type": resource_type,
            "type": type,
            "bytes": len(content),
            "tags": [],
        }
        if resource_type != "raw":
            resource.update(format=self.format, width=self.width, height=self.height)
        if options.get("width"):
            resource["width"] = options["width"]
        self.resources[(resource_type, type, public_id)] = resource
        return dict(resource)

    def upload(self, file, **options):
        self.calls.append(("upload", file, options))
        return self._store(self._content(file), options)

    def upload_large(self, file, chunk_size=None, **options):
        self.calls.append(("upload_large", file, dict(options, chunk_size=chunk_size)))
        content = b""
        while True:
            chunk = file.read(chunk_size or 20 * 1024 * 1024)
            if not chunk:
                break
            content += chunk
        return self._store(content, options)

    def rename(self, from_public_id, to_public_id, **options):
        self.calls.append(("rename", from_public_id, options))
        resource_type = options.get("resource_type", "image")
        key = (resource_type, options.get("type", "upload"), from_public_id)
        if key not in self.resources:
            raise RemoteServiceError(f"Resource not found - {from_public_id}")
        resource = self.resources.pop(key)
        resource.update(public_id=to_public_id, type=options.get("to_type", resource["type"]))
        self.resources[(resource_type, resource["type"], to_public_id)] = resource
        return dict(resource)

    def destroy(self, public_id, **options):
        self.calls.append(("destroy", public_id, options))
        key = (options.get("resource_type", "image"), options.get("type", "upload"), public_id)
        if self.resources.pop(key, None) is None:
            return {"result": "not found"}
        return {"result": "ok"}

    def explicit_update(self, public_id, **options):
        self.calls.append(("explicit", public_id, options))
        key = (options.get("resource_type", "image"), options.get("type", "upload"), public_id)
        if key not in self.resources:
            raise RemoteServiceError(f"Resource not found - {public_id}")
        resource = self.resources[key]
        if "tags" in options:
            resource["tags"] = options["tags"].split(",")
        return dict(resource)

    def resources_by_ids(self, public_ids, **options):
        self.calls.append(("resources_by_ids", public_ids, options))
        resource_type = options.get("resource_type", "image")
        type = options.get("type", "upload")
        found = [self.resources[(resource_type, type, id)] for id in public_ids
                 if (resource_type, type, id) in self.resources]
        return {"resources": found}

    def delete_resources(self, public_ids, **options):
        self.calls.append(("delete_resources", public_ids, options))
        deleted = {}
        for public_id in public_ids:
            key = (options.get("resource_type", "image"), options.get("type", "upload"), public_id)
            deleted[public_id] = "deleted" if self.resources.pop(key, None) else "not_found"
        return {"deleted": deleted}

    def delete_resources_by_prefix(self, prefix, **options):
        self.calls.append(("delete_resources_by_prefix", prefix, options))
        return self._delete_where(options, lambda public_id: public_id.startswith(prefix))

    def delete_all_resources(self, **options):
        self.calls.append(("delete_all_resources", None, options))
        return self._delete_where(options, lambda public_id: True)

    def _delete_where(self, options, matches):
        resource_type = options.get("resource_type", "image")
        type = options.get("type", "upload")
        keys = [key for key in self.resources
                if key[0] == resource_type and key[1] == type and matches(key[2])]
        for key in keys:
            del self.resources[key]
        return {"deleted": {key[2]: "deleted" for key in keys}, "partial": False}

    def uploads(self):
        return [call for call in self.calls if call[0] in ("upload", "upload_large")]
