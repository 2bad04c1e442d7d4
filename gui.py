"""
Tkinter front desk for the Visitor Management System.
Check visitors in and out, view the table, the activity log and the last badge.
"""

import logging
import tkinter as tk
from tkinter import ttk, messagebox, scrolledtext
from datetime import datetime
from pathlib import Path
from typing import Optional

from PIL import ImageTk

from utils import (
    ensure_dirs,
    configure_logging,
    require_fields,
    EmptyField,
    export_session,
    render_badge,
    save_badge,
    EXPORT_DIR,
)
from visitors import VisitorRegistry, VisitorNotFound, VisitorView, describe_view

logger = logging.getLogger(__name__)

TABLE_COLUMNS = ("name", "contact_info", "check_in", "check_out")
TABLE_HEADINGS = ("Name", "Contact Info", "Check-In Time", "Check-Out Time")


class VisitorGUI:
    # Theme colors
    BG = "#add8e6"
    PANEL_BG = "#dcdcdc"
    ACCENT = "#0d9488"
    ACCENT_HOVER = "#0f766e"
    TEXT = "#1e293b"
    DANGER = "#dc2626"

    def __init__(self, registry: VisitorRegistry, export_dir: Optional[Path] = None):
        ensure_dirs()
        self.registry = registry
        self.export_dir = export_dir if export_dir is not None else EXPORT_DIR
        self.root = tk.Tk()
        self.root.title("Visitor Management System")
        self.root.geometry("1200x800")
        self.root.minsize(900, 600)
        self.root.configure(bg=self.BG)

        self.last_view: Optional[VisitorView] = None
        self._badge_photo = None

        self._apply_styles()
        self._build_ui()

    def _apply_styles(self):
        style = ttk.Style()
        try:
            style.theme_use("clam")
        except tk.TclError:
            pass
        style.configure("TFrame", background=self.BG)
        style.configure("Panel.TFrame", background=self.PANEL_BG)
        style.configure("Panel.TLabel", background=self.PANEL_BG, foreground=self.TEXT, font=("Arial", 14, "bold"))
        style.configure("Header.TLabel", background=self.BG, foreground=self.TEXT, font=("Arial", 14, "bold"))
        style.configure("TButton", font=("Arial", 12, "bold"), padding=6)
        style.configure("Accent.TButton", background=self.ACCENT, foreground="white")
        style.map("Accent.TButton", background=[("active", self.ACCENT_HOVER), ("pressed", self.ACCENT_HOVER)])
        style.configure("Danger.TButton", background=self.DANGER, foreground="white")
        style.configure("Treeview", rowheight=30, font=("Arial", 12))
        style.configure("Treeview.Heading", font=("Arial", 12, "bold"))

    def _build_ui(self):
        main = ttk.Frame(self.root, padding=10)
        main.pack(fill=tk.BOTH, expand=True)

        # ---- Table + activity pane ----
        left = ttk.Frame(main)
        left.pack(side=tk.LEFT, fill=tk.BOTH, expand=True)
        ttk.Label(left, text="Visitors", style="Header.TLabel").pack(anchor=tk.W, pady=(0, 6))
        self.table = ttk.Treeview(left, columns=TABLE_COLUMNS, show="headings", height=18)
        for c, heading in zip(TABLE_COLUMNS, TABLE_HEADINGS):
            self.table.heading(c, text=heading)
            self.table.column(c, width=200)
        self.table.pack(fill=tk.BOTH, expand=True)
        ttk.Label(left, text="Activity", style="Header.TLabel").pack(anchor=tk.W, pady=(10, 4))
        self.activity = scrolledtext.ScrolledText(left, height=7, state=tk.DISABLED, font=("Consolas", 10), bg="#f8fafc", fg=self.TEXT)
        self.activity.pack(fill=tk.X)

        # ---- Control panel ----
        panel = ttk.Frame(main, style="Panel.TFrame", padding=12)
        panel.pack(side=tk.RIGHT, fill=tk.Y, padx=(10, 0))
        ttk.Label(panel, text="Name:", style="Panel.TLabel").pack(anchor=tk.W)
        self.name_entry = ttk.Entry(panel, width=28, font=("Arial", 14))
        self.name_entry.pack(fill=tk.X, pady=(2, 8))
        ttk.Label(panel, text="Contact:", style="Panel.TLabel").pack(anchor=tk.W)
        self.contact_entry = ttk.Entry(panel, width=28, font=("Arial", 14))
        self.contact_entry.pack(fill=tk.X, pady=(2, 12))

        buttons = (
            ("Check-In Visitor", "Accent.TButton", self._check_in),
            ("Check-Out Visitor", "TButton", self._check_out),
            ("Show Current Visitors", "TButton", self._show_current),
            ("Show Visitor Log", "TButton", self._show_log),
            ("Export CSV", "TButton", self._export),
            ("Save Badge", "TButton", self._save_badge),
            ("Exit", "Danger.TButton", self._on_close),
        )
        for text, style, command in buttons:
            ttk.Button(panel, text=text, style=style, command=command).pack(fill=tk.X, pady=4)

        self.badge_label = ttk.Label(panel, text="[No badge yet]", relief=tk.SUNKEN, anchor=tk.CENTER)
        self.badge_label.pack(pady=12)

        self.root.protocol("WM_DELETE_WINDOW", self._on_close)

    # ---- Actions ----

    def _check_in(self):
        try:
            fields = require_fields(Name=self.name_entry.get(), Contact=self.contact_entry.get())
        except EmptyField:
            messagebox.showwarning("Missing fields", "Name and Contact cannot be empty.")
            return
        view = self.registry.check_in(fields["Name"], fields["Contact"])
        self.last_view = view
        self.name_entry.delete(0, tk.END)
        self.contact_entry.delete(0, tk.END)
        self._show_badge(view)
        self._refresh_table()
        self._log(f"Checked in {view.name}.")

    def _check_out(self):
        try:
            name = require_fields(Name=self.name_entry.get())["Name"]
        except EmptyField:
            messagebox.showwarning("Missing fields", "Name cannot be empty.")
            return
        self.name_entry.delete(0, tk.END)
        try:
            view = self.registry.check_out(name)
        except VisitorNotFound as e:
            messagebox.showinfo("Not found", str(e))
            return
        self._refresh_table()
        self._log(f"Checked out {view.name}.")

    def _show_current(self):
        lines = [describe_view(v) for v in self.registry.list_current_visitors()]
        messagebox.showinfo("Current Visitors", "Current Visitors:\n" + "".join(f"{line}\n" for line in lines))

    def _show_log(self):
        lines = self.registry.get_log()
        messagebox.showinfo("Visitor Log", "Visitor Log:\n" + "".join(f"{line}\n" for line in lines))

    def _export(self):
        try:
            table_path, log_path = export_session(self.registry, self.export_dir)
        except OSError as e:
            logger.error("Export failed: %s", e)
            messagebox.showerror("Export failed", str(e))
            return
        self._log(f"Exported {table_path.name} and {log_path.name}.")
        messagebox.showinfo("Exported", f"Saved:\n{table_path}\n{log_path}")

    def _save_badge(self):
        if self.last_view is None:
            messagebox.showwarning("No badge", "Check in a visitor first.")
            return
        try:
            path = save_badge(self.last_view)
        except OSError as e:
            logger.error("Badge save failed: %s", e)
            messagebox.showerror("Save failed", str(e))
            return
        self._log(f"Badge saved to {path}.")

    def _on_close(self):
        self.root.destroy()

    # ---- Rendering ----

    def _refresh_table(self):
        for i in self.table.get_children():
            self.table.delete(i)
        for row in self.registry.snapshot_table():
            self.table.insert("", tk.END, values=tuple(row))

    def _show_badge(self, view: VisitorView):
        photo = ImageTk.PhotoImage(image=render_badge(view))
        self.badge_label.config(image=photo, text="")
        self._badge_photo = photo

    def _log(self, msg: str):
        self.activity.config(state=tk.NORMAL)
        self.activity.insert(tk.END, f"{datetime.now().strftime('%H:%M:%S')} - {msg}\n")
        self.activity.see(tk.END)
        self.activity.config(state=tk.DISABLED)

    def run(self):
        self.root.mainloop()


def main(registry: Optional[VisitorRegistry] = None):
    configure_logging()
    if registry is None:
        registry = VisitorRegistry()
    app = VisitorGUI(registry)
    app.run()


if __name__ == "__main__":
    main()
