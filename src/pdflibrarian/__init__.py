# ABOUTME: pdflibrarian resolves bibliographic metadata for PDF books and papers.
# ABOUTME: Queries several public catalogs concurrently and merges their answers.
