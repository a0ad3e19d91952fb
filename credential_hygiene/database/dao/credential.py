from __future__ import annotations

from typing import Any, Dict, List, Optional

from .base import BaseDAO


class CredentialsDAO(BaseDAO):
    """DAO exposing the ``credentials`` table as a credential store.

    Rows are stored in plaintext by the parsing pipeline, so nothing here
    decrypts anything.
    """

    def list_credentials(self, system_id: Optional[int] = None) -> List[Dict[str, Any]]:
        """Return every credential row as a store record (``id``, ``name``, ``username``, ``password``, ``url``)."""
        query = "SELECT id, software, host, username, password FROM credentials"
        params: tuple = ()
        if system_id is not None:
            query += " WHERE system_id = %s"
            params = (system_id,)
        query += " ORDER BY id;"
        rows = self._execute_query(
            query,
            params,
            fetch="all",
            ctx={"dao": "CredentialsDAO", "action": "list", "table": "credentials", "system_id": system_id},
        )
        records = []
        for row in rows or []:
            row_id, software, host, username, password = row
            records.append(
                {
                    "id": str(row_id),
                    "name": host or software or f"credential #{row_id}",
                    "username": username,
                    "password": password,
                    "url": host,
                }
            )
        self.logger.verbose(f"Loaded {len(records)} credentials from database")
        return records

    def delete_credential(self, credential_id: str) -> bool:
        """Delete one credential row; False when no row matched."""
        deleted = self._execute_query(
            "DELETE FROM credentials WHERE id = %s;",
            (int(credential_id),),
            ctx={"dao": "CredentialsDAO", "action": "delete", "table": "credentials", "id": credential_id},
        )
        return deleted > 0
