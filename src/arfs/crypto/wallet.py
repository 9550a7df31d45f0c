"""Arweave wallet handling: JWK import, deterministic signing and owner addresses."""
import json

from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import padding, rsa
from pathlib import Path
from typing import Any, Callable, Dict, Union

from arfs.errors import KeyImportFailure
from arfs.utils.helper import b64url_decode, b64url_encode

Signer = Callable[[bytes], bytes]
Wallet = Union[Dict[str, Any], rsa.RSAPrivateKey, Signer]

_JWK_PRIVATE_FIELDS = ("n", "e", "d", "p", "q", "dp", "dq", "qi")


def sha256_bytes(data: bytes) -> bytes:
    digest = hashes.Hash(hashes.SHA256())
    digest.update(data)
    return digest.finalize()


def _jwk_int(jwk: Dict[str, Any], name: str) -> int:
    return int.from_bytes(b64url_decode(jwk[name]), "big")


def load_wallet_key(jwk: Dict[str, Any]) -> rsa.RSAPrivateKey:
    """Load an RSA private key from an Arweave JWK."""
    if not isinstance(jwk, dict):
        raise KeyImportFailure("Wallet JWK must be a JSON object")
    if jwk.get("kty", "RSA") != "RSA":
        raise KeyImportFailure(f"Unsupported wallet key type: {jwk.get('kty')!r}")
    missing = [name for name in _JWK_PRIVATE_FIELDS if name not in jwk]
    if missing:
        raise KeyImportFailure(f"Wallet JWK is missing private fields: {', '.join(missing)}")
    try:
        public = rsa.RSAPublicNumbers(e=_jwk_int(jwk, "e"), n=_jwk_int(jwk, "n"))
        numbers = rsa.RSAPrivateNumbers(
            p=_jwk_int(jwk, "p"),
            q=_jwk_int(jwk, "q"),
            d=_jwk_int(jwk, "d"),
            dmp1=_jwk_int(jwk, "dp"),
            dmq1=_jwk_int(jwk, "dq"),
            iqmp=_jwk_int(jwk, "qi"),
            public_numbers=public,
        )
        return numbers.private_key()
    except (TypeError, ValueError) as e:
        raise KeyImportFailure(f"Could not import wallet key: {e}") from e


def load_wallet_file(path: Path) -> Dict[str, Any]:
    """Read a wallet keyfile. Accepts an Arweave JWK (JSON) or a PEM private key."""
    raw = Path(path).read_bytes()
    if raw.lstrip().startswith(b"-----BEGIN"):
        try:
            key = serialization.load_pem_private_key(raw, password=None)
        except (TypeError, ValueError) as e:
            raise KeyImportFailure(f"Could not import PEM wallet: {e}") from e
        if not isinstance(key, rsa.RSAPrivateKey):
            raise KeyImportFailure("Wallet PEM must hold an RSA private key")
        return private_key_to_jwk(key)
    try:
        return json.loads(raw.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise KeyImportFailure(f"Wallet file is not valid JSON: {e}") from e


def _int_b64url(value: int) -> str:
    return b64url_encode(value.to_bytes((value.bit_length() + 7) // 8, "big"))


def private_key_to_jwk(key: rsa.RSAPrivateKey) -> Dict[str, str]:
    numbers = key.private_numbers()
    return {
        "kty": "RSA",
        "n": _int_b64url(numbers.public_numbers.n),
        "e": _int_b64url(numbers.public_numbers.e),
        "d": _int_b64url(numbers.d),
        "p": _int_b64url(numbers.p),
        "q": _int_b64url(numbers.q),
        "dp": _int_b64url(numbers.dmp1),
        "dq": _int_b64url(numbers.dmq1),
        "qi": _int_b64url(numbers.iqmp),
    }


def sign_deterministic(key: rsa.RSAPrivateKey, message: bytes) -> bytes:
    # RSA-PSS with a zero-length salt yields the same signature for the same message.
    return key.sign(
        message,
        padding.PSS(mgf=padding.MGF1(hashes.SHA256()), salt_length=0),
        hashes.SHA256(),
    )


def wallet_signer(wallet: Wallet) -> Signer:
    """Turn a JWK, an RSA key object or a signer callable into a signer."""
    if isinstance(wallet, rsa.RSAPrivateKey):
        return lambda message: sign_deterministic(wallet, message)
    if isinstance(wallet, dict):
        key = load_wallet_key(wallet)
        return lambda message: sign_deterministic(key, message)
    if callable(wallet):
        return wallet
    raise KeyImportFailure(f"Unsupported wallet type: {type(wallet).__name__}")


def owner_to_address(owner: str) -> str:
    """Address of a wallet given its base64url-encoded RSA modulus."""
    try:
        modulus = b64url_decode(owner)
    except ValueError as e:
        raise KeyImportFailure(f"Malformed owner: {e}") from e
    return b64url_encode(sha256_bytes(modulus))


def wallet_address(jwk: Dict[str, Any]) -> str:
    if not isinstance(jwk, dict) or "n" not in jwk:
        raise KeyImportFailure("Wallet JWK has no public modulus")
    return owner_to_address(jwk["n"])
