COLLECTION_PK_ABBREV = 'coll'
CATEGORY_PK_ABBREV = 'catg'
PRODUCT_PK_ABBREV = 'prod'
