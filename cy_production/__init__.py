"""
Comparative Yield -> Production (lbs/acre)

Backend for turning field-survey RAW exports into a per-site forage
production estimate:

1. Upload RAW exports; their Comparative Yield sheets are normalised into
   DATE / ALLOTMENT / PASTURE / KA rows.
2. Export a 3-row-per-site template (bags 1, 3, 5) for the clipping crew.
3. Upload the filled template; a zero-intercept slope of NET WT. against
   BAG # is fitted per KA and combined with the average nValue per site
   visit into Production (lbs/acre).

To connect a front end:
    Keep a session.Session per user and call the functions in
    dashboard.py; each returns a status string plus any payload to
    download.
"""
