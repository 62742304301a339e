"""
Restaurant Sales Dashboard

Analytics backend for turning a shared order spreadsheet into
dashboard-ready metrics, rankings, insights and an executive report.

To swap the Google Sheet for another source:
    Add a loader that yields column-keyed rows and pass them through
    loaders.records_from_rows(). Everything downstream works on
    OrderRecord sequences and is unaffected.

To connect a front end:
    Call dashboard.get_dashboard_view(records, FilterState(...)) for the
    panel data and dashboard.generate_executive_report(records, range)
    for the narrative snapshot.

To change business rules:
    Thresholds (peak hours, insight shares, status bands, action
    triggers) live in config and are plain constants.
"""
