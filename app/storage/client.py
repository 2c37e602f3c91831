import io
import logging
from typing import Protocol

import boto3
from boto3.exceptions import S3UploadFailedError
from botocore.client import Config
from botocore.exceptions import BotoCoreError, ClientError

from app.config import StorageConfig

logger = logging.getLogger(__name__)

# Erros que o boto3 levanta em chamadas ao S3; todos viram StorageError
_BOTO_ERRORS = (ClientError, BotoCoreError, S3UploadFailedError)


class StorageError(Exception):
    """Falha de comunicação com o S3/MinIO."""


class ObjectStorage(Protocol):
    """Interface mínima de object storage usada pelos services."""

    def put(self, key: str, data: bytes, content_type: str, size: int) -> None: ...

    def delete(self, key: str) -> None: ...

    def presign_get(self, key: str, expiration: int) -> str: ...


class S3Client:
    """Cliente S3/MinIO usando boto3."""

    def __init__(self, config: StorageConfig):
        self.config = config
        self._bucket_checked = False
        self._client = boto3.client(
            "s3",
            endpoint_url=config.endpoint_url or None,
            aws_access_key_id=config.access_key_id,
            aws_secret_access_key=config.secret_access_key,
            region_name=config.region,
            config=Config(
                signature_version="s3v4",
                s3={"addressing_style": "path" if config.use_path_style else "auto"},
            ),
        )

    def ensure_bucket_exists(self) -> None:
        """Cria bucket se não existir (verificado uma vez por processo)."""
        if self._bucket_checked:
            return
        try:
            self._client.head_bucket(Bucket=self.config.bucket_name)
        except BotoCoreError as e:
            raise StorageError(
                f"Erro ao verificar bucket '{self.config.bucket_name}': {e}"
            ) from e
        except ClientError as e:
            error_code = e.response.get("Error", {}).get("Code", "")
            if error_code not in ("404", "NoSuchBucket"):
                raise StorageError(
                    f"Erro ao verificar bucket '{self.config.bucket_name}': {e}"
                ) from e
            try:
                if self.config.region and self.config.region != "us-east-1":
                    self._client.create_bucket(
                        Bucket=self.config.bucket_name,
                        CreateBucketConfiguration={"LocationConstraint": self.config.region},
                    )
                else:
                    self._client.create_bucket(Bucket=self.config.bucket_name)
                logger.info(f"Bucket '{self.config.bucket_name}' criado")
            except _BOTO_ERRORS as create_error:
                raise StorageError(
                    f"Erro ao criar bucket '{self.config.bucket_name}': {create_error}. "
                    f"Verifique se o MinIO está rodando e acessível em {self.config.endpoint_url}"
                ) from create_error
        self._bucket_checked = True

    def put(self, key: str, data: bytes, content_type: str, size: int) -> None:
        """
        Faz upload dos bytes para S3/MinIO.

        Args:
            key: Chave S3 (ex: "tenants/1/documents/<uuid>/ata.pdf")
            data: Conteúdo do arquivo
            content_type: MIME type
            size: Tamanho em bytes
        """
        self.ensure_bucket_exists()
        try:
            self._client.upload_fileobj(
                io.BytesIO(data),
                self.config.bucket_name,
                key,
                ExtraArgs={"ContentType": content_type},
            )
        except _BOTO_ERRORS as e:
            raise StorageError(f"Erro ao enviar arquivo para o S3: {e}") from e
        logger.debug(f"Upload concluído: {key} ({size} bytes)")

    def delete(self, key: str) -> None:
        """Exclui arquivo do S3/MinIO."""
        try:
            self._client.delete_object(Bucket=self.config.bucket_name, Key=key)
        except _BOTO_ERRORS as e:
            raise StorageError(f"Erro ao excluir arquivo do S3: {e}") from e

    def presign_get(self, key: str, expiration: int) -> str:
        """
        Gera URL presignada (temporária) para download.

        Args:
            key: Chave S3
            expiration: Tempo de expiração em segundos
        """
        try:
            return self._client.generate_presigned_url(
                "get_object",
                Params={"Bucket": self.config.bucket_name, "Key": key},
                ExpiresIn=expiration,
            )
        except _BOTO_ERRORS as e:
            raise StorageError(f"Erro ao gerar URL presignada: {e}") from e
