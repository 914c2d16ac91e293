from typing import Any, List, Sequence, Tuple

from django.core.paginator import Paginator


class CatalogPagination:
    # Default items per page
    page_size = 12
    max_page_size = 100

    def __init__(self, page_size: int = None):
        size = page_size or self.page_size
        self.page_size = max(1, min(int(size), self.max_page_size))

    def paginate(self, items: Sequence[Any], page_number: Any = 1) -> Tuple[List[Any], int, int, bool]:
        """
        Return ``(page_items, page_number, num_pages, has_next)``.

        Invalid page numbers resolve to the first page and numbers past the end
        to the last one, so a stale page never renders empty.
        """
        paginator = Paginator(items, self.page_size)
        page = paginator.get_page(page_number)
        return list(page.object_list), page.number, paginator.num_pages, page.has_next()
