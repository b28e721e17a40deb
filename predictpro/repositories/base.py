# predictpro/repositories/base.py
def keyset_page(query, id_column, limit, cursor=None):
    """Newest-first page keyed on the integer primary key.

    The cursor is the id of the last row of the previous page, as a string.
    Returns (items, next_cursor); next_cursor is None on the last page.
    """
    if limit < 1:
        raise ValueError("limit must be a positive integer")
    if cursor:
        try:
            query = query.filter(id_column < int(cursor))
        except (TypeError, ValueError):
            raise ValueError("Invalid cursor")
    items = query.order_by(id_column.desc()).limit(limit + 1).all()
    next_cursor = None
    if len(items) > limit:
        items = items[:limit]
        next_cursor = str(items[-1].id)
    return items, next_cursor
