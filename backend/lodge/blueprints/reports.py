import io
from flask import Blueprint, jsonify, request, send_file
from ..reporting import RentalReportFilter, query_rows, summarize, export_csv, report_filename

reports_bp = Blueprint('reports', __name__)


@reports_bp.get('/rental')
def rental_report():
    filters = RentalReportFilter.from_args(request.args)
    rows = query_rows(filters)
    return jsonify({'items': rows, 'summary': summarize(rows), 'filters': filters.to_dict()})


@reports_bp.get('/rental/export')
def rental_report_csv():
    filters = RentalReportFilter.from_args(request.args)
    buffer = io.BytesIO(export_csv(query_rows(filters)).encode('utf-8'))
    return send_file(buffer, mimetype='text/csv', as_attachment=True,
                     download_name=report_filename())
