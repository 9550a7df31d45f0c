#!/usr/bin/env python3
"""
ArFS entity tool.

Drives, folders and files are written as independent ledger records: a small
JSON payload plus a flat tag map. Private drives seal the payload with
AES-256-GCM; the nonce travels in the `Cipher-IV` tag.

Key hierarchy:
    drive key = HKDF-SHA256(RSA-PSS-sign(wallet, "drive" || drive_id), info=password)
    file key  = HKDF-SHA256(drive key, info=file_id)

Only the wallet and the password are secrets; every key below them is
re-derived on demand and never stored.

Ledger layout (local directory store):
  ledger/
    records/
      <txid>.bin       # record bytes (JSON or ciphertext)
      <txid>.json      # owner address + tags

Commands:
  drive-key WALLET DRIVE_ID --password P     Print a derived drive key
  file-key DRIVE_KEY FILE_ID                 Print a derived file key
  new-drive LEDGER --wallet W --name N       Create a drive and its root folder
  new-folder LEDGER ...                      Create a folder
  add-file LEDGER PATH ...                   Write a file entity for a local file
  show LEDGER TX_ID                          Decode (and decrypt) a record
"""
from arfs.ui.cli import main


if __name__ == "__main__":
    main()
