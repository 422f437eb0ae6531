"""sitedata — build-time pipeline from the content corpus to the site's JSON artifacts."""
