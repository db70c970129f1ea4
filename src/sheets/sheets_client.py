"""
Google Sheets connection helpers shared by the order store and scripts.
"""
from typing import List

import gspread
from oauth2client.service_account import ServiceAccountCredentials

import config


def get_column_letter(col_num):
    """
    Convert column number to A1-style column letter
    1 -> A, 26 -> Z, 27 -> AA, etc.
    """
    result = ""
    while col_num > 0:
        col_num -= 1
        result = chr(col_num % 26 + 65) + result
        col_num //= 26
    return result


def get_client():
    """Create a gspread client using the configured credential source."""
    scope = [
        'https://spreadsheets.google.com/feeds',
        'https://www.googleapis.com/auth/drive',
    ]
    creds_path = config.get_credentials_path()
    if creds_path:
        # Service account JSON file (local, Docker, or Cloud Run with secret)
        creds = ServiceAccountCredentials.from_json_keyfile_name(creds_path, scope)
        return gspread.authorize(creds)
    else:
        # Application Default Credentials (Cloud Run with Workload Identity)
        import google.auth
        credentials, _ = google.auth.default(scopes=scope)
        return gspread.authorize(credentials)


def open_spreadsheet(sheet_id: str = None):
    """Open the workbook by key, defaulting to GOOGLE_SHEET_ID."""
    target_sheet_id = sheet_id or config.GOOGLE_SHEET_ID
    if not target_sheet_id:
        raise ValueError("GOOGLE_SHEET_ID must be set")
    return get_client().open_by_key(target_sheet_id)


def ensure_worksheet(spreadsheet, title: str, columns: List[str]):
    """Get a tab by name, creating it with a header row when missing."""
    try:
        ws = spreadsheet.worksheet(title)
    except gspread.exceptions.WorksheetNotFound:
        ws = spreadsheet.add_worksheet(title=title, rows=1000, cols=len(columns))
        ws.append_row(columns)
        return ws

    # Tab exists but was never given a header
    if not ws.row_values(1):
        ws.update(values=[columns], range_name=f"A1:{get_column_letter(len(columns))}1")
    return ws
