from unittest import mock

import requests
from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import SimpleTestCase, override_settings

from api.media import MediaConfigurationError, MediaUploadError, upload_image
from .fakes import make_response


def picture():
    return SimpleUploadedFile('me.png', b'\x89PNG fake', content_type='image/png')


@override_settings(CLOUDINARY_CLOUD_NAME='safar', CLOUDINARY_UPLOAD_PRESET='profiles')
class UploadImageTest(SimpleTestCase):
    @mock.patch('api.media.requests.post')
    def test_returns_hosted_url(self, post):
        post.return_value = make_response(200, {'secure_url': 'https://img.test/me.png'})
        self.assertEqual(upload_image(picture()), 'https://img.test/me.png')
        args, kwargs = post.call_args
        self.assertEqual(args[0], 'https://api.cloudinary.com/v1_1/safar/image/upload')
        self.assertEqual(kwargs['data']['upload_preset'], 'profiles')

    @mock.patch('api.media.requests.post')
    def test_http_failure(self, post):
        post.return_value = make_response(400, {'error': {'message': 'bad preset'}})
        with self.assertRaises(MediaUploadError):
            upload_image(picture())

    @mock.patch('api.media.requests.post')
    def test_network_failure(self, post):
        post.side_effect = requests.Timeout('slow')
        with self.assertRaises(MediaUploadError):
            upload_image(picture())

    @mock.patch('api.media.requests.post')
    def test_missing_url(self, post):
        post.return_value = make_response(200, {})
        with self.assertRaises(MediaUploadError):
            upload_image(picture())

    @override_settings(CLOUDINARY_UPLOAD_PRESET='')
    def test_missing_configuration(self):
        with self.assertRaises(MediaConfigurationError):
            upload_image(picture())
