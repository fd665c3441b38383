import unittest
from unittest.mock import patch

import cloudinary
from cloudinary.exceptions import Error as CloudinaryError

from integrations.storage.client import CloudinaryClient
from integrations.storage.exceptions import RemoteServiceError


class TestCloudinaryClient(unittest.TestCase):

    def setUp(self):
        cloudinary.config(cloud_name="demo", api_key="1234567890", api_secret="abcdefghijklmnop")

    @patch('integrations.storage.client.uploader')
    def test_sdk_errors_become_remote_service_errors(self, mock_uploader):
        error = CloudinaryError("Invalid image file")
        mock_uploader.upload.side_effect = error

        with self.assertRaises(RemoteServiceError) as ctx:
            CloudinaryClient().upload(b"data", public_id="foo")

        self.assertIs(ctx.exception.__cause__, error)
        self.assertIn("Invalid image file", str(ctx.exception))

    @patch('integrations.storage.client.uploader')
    def test_timeout_is_forwarded(self, mock_uploader):
        mock_uploader.destroy.return_value = {"result": "ok"}

        CloudinaryClient(timeout=5).destroy("foo", resource_type="image")

        mock_uploader.destroy.assert_called_once_with("foo", resource_type="image", timeout=5)

    @patch('integrations.storage.client.uploader')
    def test_no_timeout_by_default(self, mock_uploader):
        CloudinaryClient().rename("a", "b", resource_type="image")

        mock_uploader.rename.assert_called_once_with("a", "b", resource_type="image")

    @patch('integrations.storage.client.uploader')
    def test_upload_large_passes_chunk_size(self, mock_uploader):
        CloudinaryClient().upload_large("file.mp4", chunk_size=6000000, resource_type="video")

        mock_uploader.upload_large.assert_called_once_with(
            "file.mp4", chunk_size=6000000, resource_type="video"
        )

    @patch('integrations.storage.client.api')
    def test_admin_api_calls(self, mock_api):
        mock_api.resources_by_ids.return_value = {"resources": []}
        client = CloudinaryClient()

        client.resources_by_ids(["foo"], resource_type="image")
        client.delete_resources(iter(["foo", "bar"]), resource_type="image")
        client.delete_resources_by_prefix("cache/", resource_type="image")
        client.delete_all_resources(resource_type="image")

        mock_api.resources_by_ids.assert_called_once_with(["foo"], resource_type="image")
        mock_api.delete_resources.assert_called_once_with(["foo", "bar"], resource_type="image")
        mock_api.delete_resources_by_prefix.assert_called_once_with("cache/", resource_type="image")
        mock_api.delete_all_resources.assert_called_once_with(resource_type="image")

    @patch('integrations.storage.client.api')
    def test_admin_api_errors(self, mock_api):
        mock_api.delete_all_resources.side_effect = CloudinaryError("Rate Limit Exceeded")

        with self.assertRaises(RemoteServiceError):
            CloudinaryClient().delete_all_resources(resource_type="image")

    def test_credentials_come_from_sdk_config(self):
        client = CloudinaryClient()

        self.assertEqual(client.api_key, "1234567890")
        self.assertEqual(client.api_secret, "abcdefghijklmnop")

    def test_cleanup_params_matches_form_encoding(self):
        fields = CloudinaryClient().cleanup_params({"overwrite": True, "unique_filename": False, "tags": "", "folder": None})

        self.assertEqual(fields, {"overwrite": "1", "unique_filename": "0"})

    def test_build_url(self):
        url = CloudinaryClient().build_url("foo.jpg", resource_type="image", type="upload", secure=True)

        self.assertTrue(url.startswith("https://res.cloudinary.com/demo/image/upload/foo.jpg"))

    def test_upload_api_url(self):
        url = CloudinaryClient().upload_api_url("video")

        self.assertTrue(url.endswith("/demo/video/upload"))


if __name__ == '__main__':
    unittest.main()
