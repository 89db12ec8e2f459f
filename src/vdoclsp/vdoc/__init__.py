"""Virtual documents: single-language views of host documents, their backing resources and position mapping."""
