"""
Builders for CMS-shaped test frames.
"""
import pandas as pd


def national_frame(rows):
    """CMS geography-file shaped frame from (code, n_services[, geo_level]) tuples"""
    records = []
    for row in rows:
        code, n_services = row[0], row[1]
        geo_level = row[2] if len(row) > 2 else "National"
        records.append({
            "Rndrng_Prvdr_Geo_Lvl": geo_level,
            "Rndrng_Prvdr_Geo_Desc": "National" if geo_level == "National" else "Georgia",
            "HCPCS_Cd": code,
            "HCPCS_Desc": "desc",
            "Tot_Srvcs": n_services,
        })
    return pd.DataFrame(records)


def provider_frame(rows):
    """CMS provider-and-service shaped frame from (npi, provider_type, code, n_services) tuples"""
    return pd.DataFrame([
        {
            "Rndrng_NPI": npi,
            "Rndrng_Prvdr_Last_Org_Name": "Smith",
            "Rndrng_Prvdr_Crdntls": "M.D.",
            "Rndrng_Prvdr_Gndr": "F",
            "Rndrng_Prvdr_Type": provider_type,
            "HCPCS_Cd": code,
            "Tot_Srvcs": n_services,
        }
        for npi, provider_type, code, n_services in rows
    ])
