#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Check the Orders tab for data-quality problems

Reports rows whose scalar fields disagree with the first row of the same
order, and order numbers that collide when read as numbers ("105" vs
"105.0"). Nothing is modified.
"""
import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), 'src'))

from sheets.order_store import OrderStore
from sheets.row_codec import find_anomalies
import config


def main():
    print("\n" + "="*80)
    print(f"Checking '{config.ORDERS_SHEET_NAME}' for order row anomalies")
    print("="*80 + "\n")

    try:
        store = OrderStore()
        all_data = store.worksheet.get_all_values()
        print(f"[INFO] Sheet has {len(all_data)} rows total (header included)\n")

        anomalies = find_anomalies(all_data)
        if not anomalies:
            print("[OK] No anomalies found")
            return

        for anomaly in anomalies:
            if anomaly['type'] == 'divergent_fields':
                print(
                    f"Row {anomaly['row']}: order {anomaly['order_no']} differs from its "
                    f"first row in {', '.join(anomaly['fields'])} (first row wins on read)"
                )
            elif anomaly['type'] == 'numeric_collision':
                print(
                    f"Order numbers {', '.join(anomaly['order_nos'])} are equal as numbers "
                    f"but are treated as separate orders"
                )

        print(f"\n[WARN] {len(anomalies)} anomaly(ies) found")
        print("\n" + "="*80)

    except Exception as e:
        print(f"[ERROR] {str(e)}")
        import traceback
        traceback.print_exc()
        sys.exit(1)


if __name__ == "__main__":
    main()
