#!/usr/bin/env python3
"""
Cocoa menu-bar item showing the next route home.
Requires: pip install pyobjc  (macOS only)

Mirrors the indicator served by the local FastAPI app:
  GET  /api/routes   (current label and routes)
  POST /api/refresh  (run the home command now)
"""

import logging
import threading

from AppKit import (
    NSApp, NSApplication, NSMenu, NSMenuItem, NSStatusBar, NSVariableStatusItemLength,
)
from Foundation import NSObject, NSTimer

from home_indicator.client import REFRESH, ROUTES, fetch, menu_state
from home_indicator.config import API_URL, LOG_FORMAT, LOG_LEVEL, WIDGET_SECONDS
from home_indicator.indicator import NO_DATA_LABEL

logger = logging.getLogger("home_indicator.desk_widget")

NSApplicationActivationPolicyAccessory = 1


class Controller(NSObject):
    def applicationDidFinishLaunching_(self, notification):
        self.status_item = NSStatusBar.systemStatusBar().statusItemWithLength_(NSVariableStatusItemLength)
        self.status_item.button().setTitle_(NO_DATA_LABEL)
        self.menu = NSMenu.alloc().init()
        self.menu.setAutoenablesItems_(False)
        self.status_item.setMenu_(self.menu)
        self.updateMenu_({"title": NO_DATA_LABEL, "routes": []})
        # Start the repeating timer
        self.timer = NSTimer.scheduledTimerWithTimeInterval_target_selector_userInfo_repeats_(
            WIDGET_SECONDS, self, 'tick:', None, True
        )
        # Kick off immediately
        self.tick_(None)

    def tick_(self, _):
        # Fetch in a background thread to keep the menu bar responsive
        threading.Thread(target=self._refresh, args=(ROUTES, "GET"), daemon=True).start()

    def refreshNow_(self, _):
        threading.Thread(target=self._refresh, args=(REFRESH, "POST"), daemon=True).start()

    def quit_(self, _):
        self.timer.invalidate()
        NSApp().terminate_(self)

    def _refresh(self, url, method):
        title, routes = menu_state(fetch(url, method))
        logger.info("%s | %d more routes", title, len(routes))
        # Update UI on main thread
        self.performSelectorOnMainThread_withObject_waitUntilDone_(
            'updateMenu:', {"title": title, "routes": routes}, False
        )

    def _add_item(self, title, action=None):
        item = NSMenuItem.alloc().initWithTitle_action_keyEquivalent_(title, action, "")
        if action is not None:
            item.setTarget_(self)
        self.menu.addItem_(item)
        return item

    def updateMenu_(self, payload):
        self.status_item.button().setTitle_(str(payload.get("title") or NO_DATA_LABEL))
        self.menu.removeAllItems()
        for route in payload.get("routes") or []:
            self._add_item(str(route))
        self.menu.addItem_(NSMenuItem.separatorItem())
        self._add_item("Refresh now", "refreshNow:")
        self._add_item("Quit", "quit:")


def main():
    logging.basicConfig(level=LOG_LEVEL, format=LOG_FORMAT)
    app = NSApplication.sharedApplication()
    app.setActivationPolicy_(NSApplicationActivationPolicyAccessory)
    logger.info("launching against %s", API_URL)
    delegate = Controller.alloc().init()
    app.setDelegate_(delegate)
    NSApp().run()


if __name__ == "__main__":
    main()
