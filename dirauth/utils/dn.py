from __future__ import annotations


_HEX = "0123456789abcdefABCDEF"


def _unescape(val: str) -> str:
    """Undo RFC 4514 escapes: ``\\,`` style and ``\\C3\\B6`` hex pairs (UTF-8 bytes)."""
    out = bytearray()
    i = 0
    n = len(val)
    while i < n:
        ch = val[i]
        if ch != "\\" or i + 1 >= n:
            out += ch.encode("utf-8")
            i += 1
            continue
        pair = val[i + 1:i + 3]
        if len(pair) == 2 and pair[0] in _HEX and pair[1] in _HEX:
            out.append(int(pair, 16))
            i += 3
        else:
            out += val[i + 1].encode("utf-8")
            i += 2
    return out.decode("utf-8", errors="replace")


def dn_components(dn: str) -> list[tuple[str, str]]:
    """Split a DN into ``(type, value)`` pairs, honouring escaped commas.

    ``CN=Smith\\, John,OU=Sales,DC=corp`` -> ``[("CN", "Smith, John"), ("OU", "Sales"), ("DC", "corp")]``.
    Components without ``=`` are returned with an empty type.
    """
    s = (dn or "").strip()
    if not s:
        return []

    rdns: list[str] = []
    cur: list[str] = []
    esc = False
    for ch in s:
        if esc:
            cur.append(ch)
            esc = False
            continue
        if ch == "\\":
            # keep the escape; _unescape strips it once the value is isolated
            cur.append(ch)
            esc = True
            continue
        if ch == ",":
            rdns.append("".join(cur))
            cur = []
            continue
        cur.append(ch)
    rdns.append("".join(cur))

    out: list[tuple[str, str]] = []
    for rdn in rdns:
        rdn = rdn.strip()
        if not rdn:
            continue
        if "=" in rdn:
            key, val = rdn.split("=", 1)
            out.append((key.strip(), _unescape(val.strip())))
        else:
            out.append(("", _unescape(rdn)))
    return out


def dn_first_component_value(dn: str) -> str:
    """Return first RDN value from a DN (e.g. CN=USB-Deny,OU=... -> USB-Deny)."""
    parts = dn_components(dn)
    if not parts:
        return ""
    return parts[0][1].strip()


def dn_values_of(dn: str, attr_type: str) -> list[str]:
    """All values of one RDN type in a DN, in order. The type matches case-insensitively."""
    wanted = attr_type.lower()
    return [val for key, val in dn_components(dn) if key.lower() == wanted and val]
