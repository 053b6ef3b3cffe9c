from project.storage import BlobStorage


class StaticURLStorage(BlobStorage):
    """Unsigned CDN-style URLs, for checking backend selection"""

    def upload_url(self, key, content_type):
        return f"https://cdn.example.com/upload/{key}"

    def read_url(self, key):
        return f"https://cdn.example.com/{key}"
