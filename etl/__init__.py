# WORKFLOW: ETL package for price archive ingestion and export.
# Used by: Price transfer service
# Modules include:
# 1. archive.py - Extract and build single-entry ZIP archives in memory
# 2. csv_table.py - Read and write CSV header/data rows
# 3. validators.py - Turn raw upload rows into typed records
# 4. records.py - PriceRecord and the upload/download column orders
#
# ETL flow: ZIP upload -> data.csv -> rows -> PriceRecord -> database
# Export flow: database -> PriceRecord -> rows -> data.csv -> ZIP download

"""
ETL package for price archive ingestion and export.
"""
