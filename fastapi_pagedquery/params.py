# fastapi_pagedquery/params.py

from typing import Mapping, Optional

from fastapi import Depends, Query
from pydantic import BaseModel, ConfigDict, Field

from .config import Settings, get_settings
from .errors import BadRequestError

# signed 64-bit, the widest integer drivers bind for LIMIT/OFFSET
MAX_SQL_INT = 2 ** 63 - 1
MIN_SQL_INT = -(2 ** 63)


class PageInfo(BaseModel):
	"""Page position and size; totals stay zero until a query has run."""

	model_config = ConfigDict(frozen=True, populate_by_name=True)

	# 1-based index
	page_index: int = Field(1, ge=1, alias="pageIndex")
	items_per_page: int = Field(100, gt=0, alias="itemsPerPage")
	total_item_count: int = Field(0, ge=0, alias="totalItemCount")
	total_page_count: int = Field(0, ge=0, alias="totalPageCount")

	@property
	def offset(self) -> int:
		return (self.page_index - 1) * self.items_per_page

	def with_total(self, count: int) -> "PageInfo":
		if count < 0:
			raise ValueError(f"Total item count cannot be negative: {count}")
		page_count = count // self.items_per_page
		if count % self.items_per_page > 0:
			page_count += 1
		return PageInfo(
			page_index=self.page_index,
			items_per_page=self.items_per_page,
			total_item_count=count,
			total_page_count=page_count,
		)


class SearchParams(BaseModel):
	model_config = ConfigDict(frozen=True, populate_by_name=True)

	scopes: list[str] = Field(default_factory=list)
	terms: list[str] = Field(default_factory=list)
	sort: str = ""
	page_info: PageInfo = Field(default_factory=PageInfo, alias="pageInfo")

	@classmethod
	def from_query(cls, query: Mapping[str, Optional[str]], settings: Settings | None = None) -> "SearchParams":
		"""
		Build normalized parameters from raw request values.

		``scopes`` and ``terms`` are comma separated. ``itemsPerPage`` is clamped
		into the configured bounds rather than rejected.
		"""
		settings = settings or get_settings()

		page_index = _parse_int(query, "pageIndex", default=1)
		if page_index < 1:
			raise BadRequestError(
				f"pageIndex must be 1 or greater: {page_index}",
				{"field": "pageIndex", "value": query.get("pageIndex")},
			)

		items_per_page = _parse_int(query, "itemsPerPage", default=settings.default_items_per_page)
		items_per_page = max(settings.min_items_per_page, min(items_per_page, settings.max_items_per_page))
		if (page_index - 1) * items_per_page > MAX_SQL_INT:
			raise BadRequestError(
				f"Could not parse pageIndex: {query.get('pageIndex')}",
				{"field": "pageIndex", "value": query.get("pageIndex")},
			)

		return cls(
			scopes=_split(query.get("scopes")),
			terms=_split(query.get("terms")),
			sort=query.get("sort") or "",
			page_info=PageInfo(page_index=page_index, items_per_page=items_per_page),
		)

	def ensure_single_scope(self) -> None:
		if len(self.scopes) > 1:
			raise BadRequestError("We currently only support a single scope.", {"scopes": self.scopes})
		if not self.scopes:
			raise BadRequestError("No scope specified.")

	def with_total_pages(self, count: int) -> "SearchParams":
		return self.model_copy(update={"page_info": self.page_info.with_total(count)})


def _split(raw: Optional[str]) -> list[str]:
	if not raw:
		return []
	return raw.split(",")


def _parse_int(query: Mapping[str, Optional[str]], field: str, default: int) -> int:
	raw = query.get(field)
	if raw is None or raw == "":
		return default
	try:
		value = int(raw)
		if not MIN_SQL_INT <= value <= MAX_SQL_INT:
			raise ValueError(f"{field} out of range")
		return value
	except ValueError:
		raise BadRequestError(
			f"Could not parse {field}: {raw}",
			{"field": field, "value": raw},
		) from None


class SearchQueryParams:
	def __init__(
		self,
		scopes: Optional[str] = Query(None, description="Comma separated scope names.", examples=["active"]),
		terms: Optional[str] = Query(None, description="Comma separated search terms; every term must match.", examples=["widget"]),
		sort: Optional[str] = Query(None, description="Sort key; empty selects the resource's default order."),
		page_index: Optional[str] = Query(None, alias="pageIndex", description="1-based page index."),
		items_per_page: Optional[str] = Query(None, alias="itemsPerPage", description="Page size, clamped to the configured bounds.")
	):
		self.scopes = scopes
		self.terms = terms
		self.sort = sort
		self.page_index = page_index
		self.items_per_page = items_per_page

	def as_mapping(self) -> dict[str, Optional[str]]:
		return {
			"scopes": self.scopes,
			"terms": self.terms,
			"sort": self.sort,
			"pageIndex": self.page_index,
			"itemsPerPage": self.items_per_page,
		}


def get_search_params(query: SearchQueryParams = Depends()) -> SearchParams:
	return SearchParams.from_query(query.as_mapping())
