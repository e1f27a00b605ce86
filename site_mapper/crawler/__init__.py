"""site_mapper.crawler: обход сайта, нормализация URL и реестр посещённых страниц."""
