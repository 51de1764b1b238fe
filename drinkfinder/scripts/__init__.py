"""
==============================================================================
Maintenance Scripts
==============================================================================

Command-line tools, each runnable as `python -m drinkfinder.scripts.<name>`:

- migrate:        apply pending SQL migrations
- ingest_drinks:  merge a drinks JSON file into the catalog
- geocode_stores: fill in store coordinates from their addresses
- verify_drinks:  print catalog counts and barcode coverage

==============================================================================
"""
