"""
List view controller for one admin collection
"""

import inspect
import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional, Tuple, Union

from config.settings import LIST_PAGE_SIZE
from models.record import Record
from schema.base import CollectionSchema
from services.record_gateway import GatewayError, RecordGateway, build_search_filter
from utils.display import render_cell

logger = logging.getLogger(__name__)

EMPTY_MESSAGE = "No records."

# Blocking yes/no prompt; may be sync or async
ConfirmPrompt = Callable[[str], Union[bool, Awaitable[bool]]]

async def invoke(callback: Optional[Callable[[Any], Any]], argument: Any) -> Any:
    """Call a sync-or-async callback (prompt, alert, notification)"""
    if callback is None:
        return None
    answer = callback(argument)
    if inspect.isawaitable(answer):
        answer = await answer
    return answer

class ListView:
    """
    Rows of one collection plus search, refresh and delete.

    Every load takes a generation number; a response that arrives after a
    newer load started (or after the collection changed) is dropped.
    """

    def __init__(
        self,
        gateway: RecordGateway,
        schema: CollectionSchema,
        confirm: Optional[ConfirmPrompt] = None
    ):
        self.gateway = gateway
        self.schema = schema
        self.confirm = confirm
        self.items: List[Record] = []
        self.loading = False
        self.error: Optional[str] = None
        self.query = ""
        self._generation = 0

    @property
    def is_empty(self) -> bool:
        return not self.loading and self.error is None and not self.items

    def select_collection(self, schema: CollectionSchema) -> None:
        """Switch collection; in-flight loads for the previous one become stale"""
        self._generation += 1
        self.schema = schema
        self.items = []
        self.error = None
        self.query = ""
        self.loading = False

    async def load(self) -> None:
        self._generation += 1
        generation = self._generation
        schema = self.schema
        self.loading = True
        self.error = None
        try:
            result = await self.gateway.list_records(
                schema.name,
                page=1,
                per_page=LIST_PAGE_SIZE,
                sort=schema.sort,
                filter_expr=build_search_filter(schema, self.query),
                expand=schema.expand_directive()
            )
        except GatewayError as e:
            if generation != self._generation:
                return
            logger.error(f"Failed to load {schema.name}: {e.message}")
            self.items = []
            self.error = e.message
        else:
            if generation != self._generation:
                logger.info(f"Discarding stale {schema.name} list response")
                return
            self.items = result.items
        finally:
            if generation == self._generation:
                self.loading = False

    async def refresh(self) -> None:
        await self.load()

    async def search(self, query: str) -> None:
        """Apply a free-text query and reload"""
        self.query = query or ""
        await self.load()

    async def delete(self, record: Record) -> bool:
        """
        Delete a record after confirmation

        Returns:
            True when the record was deleted; False when the prompt was
            declined or the store refused.
        """
        record_id = record.get("id")
        if not record_id:
            return False

        confirmed = await invoke(self.confirm, f"Delete this {self.schema.name} record?")
        if not confirmed:
            return False

        try:
            await self.gateway.delete_record(self.schema.name, record_id)
        except GatewayError as e:
            logger.error(f"Failed to delete {self.schema.name} {record_id}: {e.message}")
            self.error = e.message
            return False

        await self.load()
        return True

    def rows(self) -> List[Tuple[Record, List[str]]]:
        """Each record with its rendered cells, in column order"""
        columns = self.schema.list_columns
        return [(record, [render_cell(c, record) for c in columns]) for record in self.items]

    def headers(self) -> List[str]:
        return [c.header for c in self.schema.list_columns]

    def snapshot(self) -> Dict[str, Any]:
        """Template-ready state"""
        return {
            "collection": self.schema.name,
            "label": self.schema.label,
            "headers": self.headers(),
            "rows": self.rows(),
            "loading": self.loading,
            "error": self.error,
            "empty": self.is_empty,
            "empty_message": EMPTY_MESSAGE,
            "query": self.query,
        }
