"""List-view engine for the job portal: search, facets, sorting, paging and status workflow."""

__version__ = "0.1.0"
