"""Page abstractions: generic extraction (``browser_page``) and the Adblock
Plus options page (``settings_page``)."""
