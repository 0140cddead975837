# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Store: DynamoDB (or DynamoDB Local) data access.

Tables are created lazily on first use and the default commander account is
seeded alongside them. Professionals are keyed by lower-cased email, so
lookups by id fall back to a filtered scan.
"""
import json
from typing import Any, Dict, List, Optional

import boto3
from boto3.dynamodb.conditions import Attr
from botocore.exceptions import ClientError

from commander.core.logging import get_logger
from commander.metrics import STORE_INITIALIZATIONS
from commander.stores.base import (
    InitOnce, ProfessionalStore, coalesce_updates, normalize_email, strip_password,
    utc_now_iso,
)
from commander.stores.seed import commander_record, hash_password

logger = get_logger(__name__)

SEED_PROFESSIONAL_ID = "PRO-dynamo-commander-1"
ACTIVE_DRILL_KEY = "active"


def _public(item: Dict[str, Any]) -> Dict[str, Any]:
    out = strip_password(item)
    out.pop("email_lower", None)
    return out


class DynamoProfessionalStore(ProfessionalStore):
    backend = "dynamodb"

    def __init__(self, resource=None, endpoint_url: Optional[str] = None,
                 region_name: str = "us-east-1", table_prefix: str = "commander_",
                 seed_email: str = "commander@test.com", seed_password: str = "commander123",
                 bcrypt_rounds: int = 10):
        self._resource = resource or boto3.resource(
            "dynamodb", endpoint_url=endpoint_url, region_name=region_name,
        )
        self.professionals_table = f"{table_prefix}professionals"
        self.passwords_table = f"{table_prefix}passwords"
        self.drills_table = f"{table_prefix}drills"
        self._seed_email = seed_email
        self._seed_password = seed_password
        self._bcrypt_rounds = bcrypt_rounds
        self._init = InitOnce(self._initialize)

    # ── Lifecycle ──────────────────────────────────────────────────────

    def _table_specs(self):
        return (
            (self.professionals_table, "email_lower"),
            (self.passwords_table, "professionalId"),
            (self.drills_table, "id"),
        )

    def _create_table(self, name: str, hash_key: str) -> None:
        try:
            table = self._resource.create_table(
                TableName=name,
                AttributeDefinitions=[{"AttributeName": hash_key, "AttributeType": "S"}],
                KeySchema=[{"AttributeName": hash_key, "KeyType": "HASH"}],
                BillingMode="PAY_PER_REQUEST",
            )
            table.wait_until_exists()
            logger.info("Created DynamoDB table %s", name)
        except ClientError as exc:
            if exc.response["Error"]["Code"] != "ResourceInUseException":
                raise
            logger.debug("DynamoDB table %s already exists", name)

    def _put_if_absent(self, table_name: str, item: Dict[str, Any], hash_key: str) -> bool:
        """Conditional put; returns False when a row with that key already exists."""
        try:
            self._table(table_name).put_item(
                Item=item,
                ConditionExpression=f"attribute_not_exists({hash_key})",
            )
        except ClientError as exc:
            if exc.response["Error"]["Code"] != "ConditionalCheckFailedException":
                raise
            return False
        return True

    def _seed(self) -> None:
        # Password row first: each step is idempotent, so a retry after a
        # partial failure fills in whatever is still missing.
        passwords = self._table(self.passwords_table)
        if not passwords.get_item(Key={"professionalId": SEED_PROFESSIONAL_ID}).get("Item"):
            self._put_if_absent(self.passwords_table, {
                "professionalId": SEED_PROFESSIONAL_ID,
                "password_hash": hash_password(self._seed_password, self._bcrypt_rounds),
            }, "professionalId")

        record = commander_record(SEED_PROFESSIONAL_ID, "Commander (DynamoDB)", self._seed_email)
        record["email_lower"] = normalize_email(self._seed_email)
        if self._put_if_absent(self.professionals_table, record, "email_lower"):
            logger.info("Seeded default commander id=%s", SEED_PROFESSIONAL_ID)
        else:
            logger.info("Default commander already present, skipping seed")

    def _initialize(self) -> None:
        for name, hash_key in self._table_specs():
            self._create_table(name, hash_key)
        self._seed()
        STORE_INITIALIZATIONS.labels(backend=self.backend).inc()

    def ensure_tables(self) -> None:
        self._init.ensure()

    # ── Professionals ──────────────────────────────────────────────────

    def find_professional_by_email(self, email: str) -> Optional[Dict[str, Any]]:
        self.ensure_tables()
        resp = self._table(self.professionals_table).get_item(
            Key={"email_lower": normalize_email(email)}
        )
        item = resp.get("Item")
        if not item:
            return None
        pw = self._table(self.passwords_table).get_item(
            Key={"professionalId": item["professional_id"]}
        ).get("Item") or {}
        return {**_public(item), "password_hash": pw.get("password_hash")}

    def find_professional_by_id(self, professional_id: str) -> Optional[Dict[str, Any]]:
        self.ensure_tables()
        item = self._scan_by_id(professional_id)
        return _public(item) if item else None

    def list_professionals(self) -> List[Dict[str, Any]]:
        self.ensure_tables()
        return [_public(item) for item in self._scan()]

    def update_professional(self, professional_id: str,
                            updates: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        self.ensure_tables()
        item = self._scan_by_id(professional_id)
        if not item:
            return None
        updated = {**item, **coalesce_updates(updates), "updated_at": utc_now_iso()}
        self._table(self.professionals_table).put_item(Item=updated)
        return _public(updated)

    # ── Drill / resources ──────────────────────────────────────────────

    def get_active_drill(self) -> Optional[Dict[str, Any]]:
        self.ensure_tables()
        item = self._table(self.drills_table).get_item(Key={"id": ACTIVE_DRILL_KEY}).get("Item")
        if not item:
            return None
        return json.loads(item.get("data") or "{}")

    def set_active_drill(self, drill: Dict[str, Any]) -> Dict[str, Any]:
        self.ensure_tables()
        self._table(self.drills_table).put_item(Item={
            "id": ACTIVE_DRILL_KEY,
            "data": json.dumps(drill),
            "updated_at": utc_now_iso(),
        })
        return drill

    def get_resource_requests(self) -> List[Dict[str, Any]]:
        return []

    # ── Ops ────────────────────────────────────────────────────────────

    def verify_connection(self) -> None:
        self.ensure_tables()
        self._resource.meta.client.describe_table(TableName=self.professionals_table)

    # ── Private ────────────────────────────────────────────────────────

    def _table(self, name: str):
        return self._resource.Table(name)

    def _scan(self, **kwargs) -> List[Dict[str, Any]]:
        table = self._table(self.professionals_table)
        items: List[Dict[str, Any]] = []
        while True:
            resp = table.scan(**kwargs)
            items.extend(resp.get("Items", []))
            last_key = resp.get("LastEvaluatedKey")
            if not last_key:
                return items
            kwargs["ExclusiveStartKey"] = last_key

    def _scan_by_id(self, professional_id: str) -> Optional[Dict[str, Any]]:
        # email_lower is the partition key, so an id lookup reads the whole table.
        items = self._scan(FilterExpression=Attr("professional_id").eq(professional_id))
        return items[0] if items else None
