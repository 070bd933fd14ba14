from typing import Any, Dict

from backoffice.services.records import CollectionService, assign_item_ids


class PurchaseService(CollectionService):
    collection = "purchases"

    def _prepare(self, data: Dict[str, Any]) -> Dict[str, Any]:
        if isinstance(data.get("items"), list):
            data["items"] = assign_item_ids(data["items"])
        return data
