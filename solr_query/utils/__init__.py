"""Utility modules for solr-query."""
