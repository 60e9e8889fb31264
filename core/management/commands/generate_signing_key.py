"""
Django management command to provision activation file key material.

Writes an RSA key pair (private key as PKCS#1 PEM, public key as
SubjectPublicKeyInfo PEM) and prints a fresh AES key ring entry for
ACTIVATION_SYMMETRIC_KEYS.
"""

import base64
import logging
import os
from pathlib import Path

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from django.core.management.base import BaseCommand, CommandError

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    """Command to generate activation signing and encryption keys."""

    help = "Generate the RSA signing key pair and an AES key for activation files"

    def add_arguments(self, parser):
        """Add command arguments."""
        parser.add_argument(
            "--out-dir",
            type=str,
            default="keys",
            help="Directory for private.pem and public.pem (default: keys)",
        )
        parser.add_argument(
            "--bits",
            type=int,
            default=2048,
            help="RSA modulus size (default: 2048)",
        )
        parser.add_argument(
            "--aes-bytes",
            type=int,
            choices=[16, 24, 32],
            default=32,
            help="Symmetric key length in bytes (default: 32)",
        )
        parser.add_argument(
            "--key-id",
            type=str,
            default="k1",
            help="Id of the symmetric key in the ring (default: k1)",
        )
        parser.add_argument(
            "--force",
            action="store_true",
            help="Overwrite existing key files",
        )

    def handle(self, *args, **options):
        """Execute the command."""
        out_dir = Path(options["out_dir"])
        private_path = out_dir / "private.pem"
        public_path = out_dir / "public.pem"

        if private_path.exists() and not options["force"]:
            raise CommandError(f"{private_path} exists; use --force to overwrite")
        if options["bits"] < 2048:
            raise CommandError("RSA keys must be at least 2048 bits")

        out_dir.mkdir(parents=True, exist_ok=True)
        private_key = rsa.generate_private_key(public_exponent=65537, key_size=options["bits"])

        private_path.write_bytes(
            private_key.private_bytes(
                encoding=serialization.Encoding.PEM,
                format=serialization.PrivateFormat.TraditionalOpenSSL,
                encryption_algorithm=serialization.NoEncryption(),
            )
        )
        os.chmod(private_path, 0o600)
        public_path.write_bytes(
            private_key.public_key().public_bytes(
                encoding=serialization.Encoding.PEM,
                format=serialization.PublicFormat.SubjectPublicKeyInfo,
            )
        )

        symmetric_key = base64.b64encode(os.urandom(options["aes_bytes"])).decode("ascii")
        key_id = options["key_id"]
        logger.info(
            "Generated activation key material",
            extra={"out_dir": str(out_dir), "bits": options["bits"], "key_id": key_id},
        )

        # pylint: disable=no-member
        self.stdout.write(self.style.SUCCESS(f"Private key: {private_path}"))
        self.stdout.write(self.style.SUCCESS(f"Public key:  {public_path}"))
        self.stdout.write("\nProvision these settings (keep the symmetric key secret):")
        self.stdout.write(f"  ACTIVATION_PRIVATE_KEY_PATH={private_path.resolve()}")
        self.stdout.write(f"  ACTIVATION_SYMMETRIC_KEYS={key_id}:{symmetric_key}")
        self.stdout.write(f"  ACTIVATION_SYMMETRIC_KEY_ID={key_id}")
