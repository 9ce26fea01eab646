from models.document import CamelModel


class StoreStats(CamelModel):
    total_documents: int
    total_sections: int
    total_tables: int
    total_visuals: int
    storage_used_bytes: int
    storage_limit_bytes: int
    storage_percent: float
