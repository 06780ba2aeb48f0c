# catgallery/models.py
from sqlalchemy import Column, String

from catgallery.db import Base


# ----- Cached gallery item -----
class CatImage(Base):
    __tablename__ = "cat_images"

    # id assigned by the remote API; re-fetching the same id overwrites the row
    remote_id = Column(String, primary_key=True)

    image_url = Column(String, nullable=False)

    # generated from the page/index the item was fetched at
    title = Column(String, nullable=False)
    description = Column(String, nullable=False)

    def __repr__(self):
        return f"<CatImage {self.remote_id} {self.title!r}>"
