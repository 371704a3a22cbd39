"""doc_scout.crawler: обход ссылок, загрузка страниц и модели данных."""
