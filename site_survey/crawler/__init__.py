"""site_survey.crawler: ядро обхода — нормализация URI, классификация ссылок, загрузка и движок."""
