"""
CargoDesk - Search Parameters Model

Query parameters shared by every /search endpoint.
"""

from typing import Dict, Literal, Optional

from pydantic import BaseModel, Field

SORT_ASC = "ASC"
SORT_DESC = "DESC"


class SearchParams(BaseModel):
    """Structured search: filter fields plus page and sort"""
    filters: Dict[str, str] = {}
    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=25, ge=1)
    sort_by: Optional[str] = None
    sort_dir: Literal["ASC", "DESC"] = SORT_ASC

    def ToQuery(self) -> dict:
        """Flatten into backend query parameters, dropping empty filters"""
        query = {key: value for key, value in self.filters.items() if value not in (None, "")}
        query["page"] = self.page
        query["page_size"] = self.page_size
        if self.sort_by:
            query["sort_by"] = self.sort_by
            query["sort_dir"] = self.sort_dir
        return query
