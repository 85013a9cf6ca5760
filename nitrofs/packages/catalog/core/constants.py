"""目录索引使用的常量定义。"""

HTTP_STATUS_OK = 200

# 根目录固定为 id=1，由 init_db 创建且不可删除
ROOT_DIRECTORY_ID = 1
ROOT_DIRECTORY_PATH = "root"

DEFAULT_MIME_TYPE = "application/octet-stream"

# list_files 支持的排序键；其它取值（含缺省）按创建时间倒序
SORT_BY_FILE_NAME = "file_name"
SORT_BY_SIZE = "size"
SORT_BY_CREATED_AT = "created_at"
