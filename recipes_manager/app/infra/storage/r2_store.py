# recipes_manager/app/infra/storage/r2_store.py
"""
Cloudflare R2 picture store.
R2 is S3-compatible, so we use boto3 with custom endpoint.
"""
from __future__ import annotations

import logging
from typing import Any, Optional

import boto3
from botocore.config import Config
from botocore.exceptions import ClientError

from recipes_manager.app.domain.errors import PictureStorageError
from recipes_manager.app.domain.ids import RecipeID
from recipes_manager.app.domain.models import RecipePicture
from recipes_manager.app.infra.storage.base import PictureStore

logger = logging.getLogger(__name__)

_NOT_FOUND_CODES = {"404", "NoSuchKey"}


def _error_code(error: ClientError) -> str:
    return error.response.get("Error", {}).get("Code", "Unknown")


class R2PictureStore(PictureStore):
    """
    Picture store backed by an R2 bucket.

    Each picture is one object under recipes/{id}/pictures/{name} holding the
    encoded picture text.
    """

    def __init__(
        self,
        account_id: Optional[str] = None,
        access_key_id: Optional[str] = None,
        secret_access_key: Optional[str] = None,
        bucket_name: Optional[str] = None,
        client: Any = None,
    ):
        self.bucket_name = bucket_name
        if client is not None:
            self._client = client
        else:
            if not all([account_id, access_key_id, secret_access_key, bucket_name]):
                raise PictureStorageError(
                    "-",
                    "Missing R2 configuration. Required: R2_ACCOUNT_ID, R2_ACCESS_KEY_ID, "
                    "R2_SECRET_ACCESS_KEY, R2_BUCKET_NAME",
                )
            endpoint_url = f"https://{account_id}.r2.cloudflarestorage.com"
            self._client = boto3.client(
                "s3",
                endpoint_url=endpoint_url,
                aws_access_key_id=access_key_id,
                aws_secret_access_key=secret_access_key,
                config=Config(
                    signature_version="s3v4",
                    retries={"max_attempts": 3, "mode": "adaptive"},
                ),
                region_name="auto",  # R2 uses 'auto' as region
            )
            logger.info(
                "R2PictureStore initialized: bucket=%s, endpoint=%s",
                bucket_name,
                endpoint_url,
            )

    def get(self, recipe_id: RecipeID, name: str) -> RecipePicture:
        key = self.object_key(recipe_id, name)
        try:
            response = self._client.get_object(Bucket=self.bucket_name, Key=key)
        except ClientError as e:
            if _error_code(e) in _NOT_FOUND_CODES:
                logger.debug("Picture not found in R2: key=%s", key)
                return RecipePicture.not_found(name)
            logger.error("Failed to read picture from R2: %s", e)
            raise PictureStorageError(key, str(e)) from e

        body = response["Body"].read()
        return RecipePicture(id=recipe_id, name=name, picture=body.decode("utf-8"))

    def put(self, picture: RecipePicture) -> None:
        key = self.object_key(picture.id, picture.name)
        try:
            self._client.put_object(
                Bucket=self.bucket_name,
                Key=key,
                Body=picture.picture.encode("utf-8"),
                ContentType="text/plain",
            )
        except ClientError as e:
            logger.error("Failed to upload picture to R2: %s", e)
            raise PictureStorageError(key, str(e)) from e
        logger.info("Uploaded picture to R2: key=%s", key)

    def remove(self, recipe_id: RecipeID, name: str) -> bool:
        key = self.object_key(recipe_id, name)
        try:
            self._client.head_object(Bucket=self.bucket_name, Key=key)
            self._client.delete_object(Bucket=self.bucket_name, Key=key)
        except ClientError as e:
            if _error_code(e) in _NOT_FOUND_CODES:
                return False
            logger.error("Failed to delete picture from R2: %s", e)
            raise PictureStorageError(key, str(e)) from e
        logger.info("Deleted picture from R2: key=%s", key)
        return True

    def remove_all(self, recipe_id: RecipeID) -> int:
        prefix = self.prefix(recipe_id)
        removed = 0
        try:
            # pages hold at most 1000 keys, the delete_objects batch limit
            paginator = self._client.get_paginator("list_objects_v2")
            for page in paginator.paginate(Bucket=self.bucket_name, Prefix=prefix):
                keys = [obj["Key"] for obj in page.get("Contents", [])]
                if not keys:
                    continue
                self._client.delete_objects(
                    Bucket=self.bucket_name,
                    Delete={"Objects": [{"Key": key} for key in keys]},
                )
                removed += len(keys)
        except ClientError as e:
            logger.error("Failed to delete pictures from R2: %s", e)
            raise PictureStorageError(prefix, str(e)) from e
        if removed:
            logger.info("Deleted %d picture(s) from R2: prefix=%s", removed, prefix)
        return removed
