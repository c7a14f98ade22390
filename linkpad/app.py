# app.py
'''
Copyright 2025 Aaron Vose (avose@aaronvose.net)
Licensed under the LGPL v2.1; see the file 'LICENSE' for details.
'''
import wx

from linkpad.core.log import Log
from linkpad.core.store import LinkStore
from linkpad.core.targets import TargetKind, classify_entry_text

if tuple(getattr(wx, 'VERSION', (0,0,0))[:3]) < (4, 2, 0):
    raise RuntimeError(f"LinkPad requires wxPython ≥ 4.2.0; found {wx.__version__}")

def show_alert(message: str, parent=None):
    """Modal message box for the store's alert channel."""
    wx.MessageBox(message, "LinkPad", wx.OK | wx.ICON_INFORMATION, parent)

def confirm_replace(question: str, parent=None) -> bool:
    answer = wx.MessageBox(question, "Replace document?", wx.YES_NO | wx.NO_DEFAULT | wx.ICON_WARNING, parent)
    return answer == wx.YES

def open_store(path=None, on_alert=None, on_change=None, delay=None) -> LinkStore:
    """
    Build the store for a wx application.

    Timer and writer callbacks are marshalled to the GUI thread with
    wx.CallAfter, so the document is only ever touched from there. Alerts
    default to a message box.
    """
    return LinkStore.open(
        path,
        delay=delay,
        post=wx.CallAfter,
        on_alert=on_alert or show_alert,
        on_change=on_change,
    )

def bind_shutdown(window: wx.TopLevelWindow, store: LinkStore):
    """Flush pending saves synchronously when window closes."""
    def _on_close(event):
        Log.debug("Window closing; flushing document", 1)
        store.close()
        event.Skip()

    window.Bind(wx.EVT_CLOSE, _on_close)

def open_entry(store: LinkStore, entry_id: str) -> bool:
    """Open an entry's URL in the browser, or its file/folder with the desktop."""
    entry = store.find_entry(entry_id)
    if entry is None:
        return False

    target = classify_entry_text(entry.text)
    if target.kind is TargetKind.URL:
        ok = wx.LaunchDefaultBrowser(target.value)
    elif target.kind is TargetKind.MISSING:
        store.alert(target.error)
        return False
    else:
        ok = wx.LaunchDefaultApplication(target.value)

    if not ok:
        store.alert(f"Could not open {target.value}")
    return ok
