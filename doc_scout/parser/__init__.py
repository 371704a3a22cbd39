"""doc_scout.parser: разбор HTML, фильтры страниц и извлечение контента."""
